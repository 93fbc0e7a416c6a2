"""
base.py
-------
Defines the BaseStage interface for record-at-a-time pipeline stages, and
the emitter stages hand their output records to.
"""
from typing import Any, Dict, Iterable, List, Optional

from ..schema import Schema


class Emitter:
    def emit(self, record: Dict[str, Any]) -> None:
        raise NotImplementedError


class ListEmitter(Emitter):
    """Collects emitted records in memory."""

    def __init__(self):
        self.emitted: List[Dict[str, Any]] = []

    def emit(self, record):
        self.emitted.append(record)


class BaseStage:
    # Properties model used to build the stage from a plain dict.
    config_class = None

    def configure_pipeline(self, input_schema: Optional[Schema]) -> Schema:
        """
        Deploy time: validate properties against the input schema.
        Returns the output schema. Raises ConfigurationError.
        """
        raise NotImplementedError

    def initialize(self, arguments: Optional[Dict[str, str]] = None) -> None:
        """Run start: resolve deferred properties and prepare per-run state."""
        raise NotImplementedError

    def transform(self, record: Dict[str, Any], emitter: Emitter) -> None:
        raise NotImplementedError

    def transform_all(self, records: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        emitter = ListEmitter()
        for record in records:
            self.transform(record, emitter)
        return emitter.emitted
