"""
http_get_stage.py
-----------------
Implements HttpGetTransform: GETs the URL held by each record, parses the
JSON object it returns and fills the output fields from it. Fields the
response does not carry fall back to the input record.

A failed call (non-200, transport error, body that is not a JSON object)
is logged and the record is emitted with its input fields only.
"""
import json
from typing import Any, Dict, Optional

from .base import BaseStage, Emitter
from ..errors import HttpFailure
from ..invoker import execute
from ..merger import merge_fields
from ..request_builder import HttpRequest
from ..schema import Schema
from ..stage_config import HttpGetConfig
from ..utils.config_validation import validate_http_get_config
from ..utils.logging import get_logger

logger = get_logger("stages.httpget")


class HttpGetTransform(BaseStage):
    config_class = HttpGetConfig

    def __init__(self, config: HttpGetConfig):
        self.config = config
        self._output_schema: Optional[Schema] = None

    def configure_pipeline(self, input_schema):
        return validate_http_get_config(self.config, input_schema)

    def initialize(self, arguments=None):
        self._output_schema = validate_http_get_config(self.config, None)
        logger.info("Initialized HTTP GET stage on field '%s'", self.config.url_field)

    @property
    def output_schema(self) -> Schema:
        if self._output_schema is None:
            raise RuntimeError("HttpGetTransform.initialize() must be called before transform()")
        return self._output_schema

    def fetch(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Return the JSON object served at the record's URL, or {} when there is none."""
        url = record.get(self.config.url_field)
        if url is None:
            logger.warning("Input Record does not contain field %s", self.config.url_field)
            return {}
        try:
            result = json.loads(execute(HttpRequest(method="GET", url=url)))
        except HttpFailure as failure:
            logger.warning("GET %s returned HTTP %s", url, failure.code)
            return {}
        except Exception as e:
            logger.warning("GET %s failed: %s", url, e)
            return {}
        if not isinstance(result, dict):
            logger.warning("GET %s returned %s, expected a JSON object", url, type(result).__name__)
            return {}
        return result

    def transform(self, record, emitter: Emitter):
        output_schema = self.output_schema
        emitter.emit(merge_fields(record, self.fetch(record), output_schema))
