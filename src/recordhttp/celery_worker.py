"""
celery_worker.py
---------------
Defines the Celery app and the partition task. The host splits its record
stream into disjoint partitions; each task builds its own stage from the
immutable properties, initializes it once and transforms every record of
its partition. Tasks share nothing but the properties they were sent.
"""
from typing import Any, Dict, List, Optional

from celery import Celery
from celery.signals import worker_init

from .config import BROKER_URL, RESULT_BACKEND, settings
from .schema import Schema
from .utils.logging import get_logger, setup_logging

logger = get_logger("worker")

app = Celery("recordhttp", broker=BROKER_URL, backend=RESULT_BACKEND)


# --- Stage registry ---
STAGE_REGISTRY = {}


def register_stage(name, stage_cls):
    STAGE_REGISTRY[name] = stage_cls


def _register_builtin_stages():
    from .stages.http_stage import HttpTransform
    from .stages.http_get_stage import HttpGetTransform

    register_stage("http", HttpTransform)
    register_stage("httpget", HttpGetTransform)


_register_builtin_stages()


def get_stage(stage_name, config):
    """Build a registered stage from its config object or from a plain properties dict."""
    if stage_name not in STAGE_REGISTRY:
        raise KeyError(f"Unknown stage: {stage_name}")
    stage_cls = STAGE_REGISTRY[stage_name]
    if isinstance(config, dict):
        config = stage_cls.config_class.from_properties(config)
    return stage_cls(config)


def run_stage(
    stage_name: str,
    properties: Dict[str, Any],
    input_schema: Optional[Dict[str, Any]],
    records: List[Dict[str, Any]],
    arguments: Optional[Dict[str, str]] = None,
) -> List[Dict[str, Any]]:
    """Configure, initialize and run one stage over a list of records."""
    stage = get_stage(stage_name, properties)
    schema = Schema.parse_obj_checked(input_schema) if input_schema is not None else None
    stage.configure_pipeline(schema)
    stage.initialize(arguments)
    return stage.transform_all(records)


# No retries: per-record failures are already part of the output.
@app.task(bind=True, name="recordhttp.run_partition")
def run_partition(self, stage_name, properties, input_schema, records, arguments=None):
    logger.info("Partition task %s: %d records through stage '%s'", self.request.id, len(records), stage_name)
    return run_stage(stage_name, properties, input_schema, records, arguments)


@worker_init.connect
def worker_ready(sender=None, **kwargs):
    setup_logging(settings.LOG_LEVEL)
    logger.info("Worker initialized with stages: %s", sorted(STAGE_REGISTRY))
