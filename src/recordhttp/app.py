"""
app.py
--------
FastAPI entrypoint. Lets a pipeline host validate a stage at deploy time,
run records through it synchronously, or dispatch record partitions to the
Celery workers.
"""
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from recordhttp.celery_worker import STAGE_REGISTRY, get_stage, run_partition, run_stage
from recordhttp.config import settings
from recordhttp.errors import ConfigurationError
from recordhttp.schema import Schema
from recordhttp.utils.logging import get_logger, setup_logging

setup_logging(settings.LOG_LEVEL)
logger = get_logger("api")

app = FastAPI(title="Record HTTP Stage API")


class ValidateRequest(BaseModel):
    config: Dict[str, Any]
    input_schema: Optional[Dict[str, Any]] = None


class TransformRequest(ValidateRequest):
    records: List[Dict[str, Any]] = []
    arguments: Dict[str, str] = {}


class RunRequest(TransformRequest):
    partition_size: int = 1000


def _require_stage(name: str):
    if name not in STAGE_REGISTRY:
        raise HTTPException(status_code=404, detail=f"Unknown stage: {name}")


# -------------------------------
# Deploy-time validation
# -------------------------------
@app.post("/stages/{name}/validate")
def validate_stage(name: str, request: ValidateRequest):
    _require_stage(name)
    try:
        stage = get_stage(name, request.config)
        input_schema = Schema.parse_obj_checked(request.input_schema) if request.input_schema is not None else None
        output_schema = stage.configure_pipeline(input_schema)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid stage configuration: {e}")
    return {"output_schema": output_schema.model_dump()}


# -------------------------------
# Synchronous transform
# -------------------------------
@app.post("/stages/{name}/transform")
def transform_records(name: str, request: TransformRequest):
    _require_stage(name)
    try:
        records = run_stage(name, request.config, request.input_schema, request.records, request.arguments)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid stage configuration: {e}")
    return {"records": records}


# -------------------------------
# Dispatch partitions to workers
# -------------------------------
@app.post("/stages/{name}/run")
def run_stage_async(name: str, request: RunRequest):
    _require_stage(name)
    if request.partition_size < 1:
        raise HTTPException(status_code=400, detail="partition_size must be positive")
    try:
        stage = get_stage(name, request.config)
        input_schema = Schema.parse_obj_checked(request.input_schema) if request.input_schema is not None else None
        stage.configure_pipeline(input_schema)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid stage configuration: {e}")

    task_ids = []
    for start in range(0, len(request.records), request.partition_size):
        partition = request.records[start:start + request.partition_size]
        async_result = run_partition.apply_async(
            args=[name, request.config, request.input_schema, partition, request.arguments]
        )
        task_ids.append(async_result.id)
    logger.info("Dispatched %d records to %d partitions", len(request.records), len(task_ids))
    return {"task_ids": task_ids}
