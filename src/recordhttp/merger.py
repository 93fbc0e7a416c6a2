"""
merger.py
---------
Builds the output record from the input record and the invocation result.
"""
from typing import Any, Dict, Mapping

from .schema import Schema


def merge(record: Mapping[str, Any], response_value: str, output_schema: Schema, response_field: str) -> Dict[str, Any]:
    """
    The response field always holds response_value. Every other output field
    is copied from the input when it has a non-null value there and left
    unset otherwise.
    """
    output: Dict[str, Any] = {}
    for name in output_schema.field_names:
        if name == response_field:
            output[name] = response_value
        elif record.get(name) is not None:
            output[name] = record[name]
    return output


def merge_fields(record: Mapping[str, Any], result: Mapping[str, Any], output_schema: Schema) -> Dict[str, Any]:
    """Fill each output field from result, falling back to the input record. Nulls count as absent."""
    output: Dict[str, Any] = {}
    for name in output_schema.field_names:
        if result.get(name) is not None:
            output[name] = result[name]
        elif record.get(name) is not None:
            output[name] = record[name]
    return output
