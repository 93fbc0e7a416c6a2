"""
config_validation.py
--------------------
Deploy-time validation of HTTP stage properties against the input schema.
Everything checked here is assumed, not re-checked, by the per-record path.
"""
from typing import Optional

from ..credentials import CredentialMap
from ..errors import ConfigurationError
from ..request_builder import parse_headers
from ..schema import STRING, Schema
from ..stage_config import SUPPORTED_METHODS, HttpGetConfig, StageConfig, contains_macro

CREDENTIAL_LABELS = {"username": "Username", "password": "Password", "auth_token": "Authorization token"}


def _require_string_field(schema: Schema, field_name: str, schema_label: str) -> None:
    field = schema.get_field(field_name)
    if field is None:
        raise ConfigurationError(
            f"Field '{field_name}' does not exist in {schema_label} schema {schema.field_names}."
        )
    if field.base_type != STRING:
        raise ConfigurationError(
            f"Field '{field_name}' is of illegal type {field.base_type}. Must be of type {STRING}."
        )


def validate_output_schema(config: StageConfig) -> Schema:
    output_schema = Schema.parse_json(config.output_schema)
    if not config.response_field:
        raise ConfigurationError("Response Field is required.")
    _require_string_field(output_schema, config.response_field, "output")
    return output_schema


def validate_runtime_properties(config: StageConfig) -> None:
    """Checks for the properties that may arrive as macros; skipped while still deferred."""
    if not contains_macro(config.http_method) and config.method not in SUPPORTED_METHODS:
        raise ConfigurationError(
            f"HTTP method '{config.http_method}' is not supported. Use one of {', '.join(SUPPORTED_METHODS)}."
        )
    if not contains_macro(config.headers):
        parse_headers(config.headers)
    for name, value in config.credential_maps.items():
        if value is not None and not contains_macro(value):
            CredentialMap.parse(CREDENTIAL_LABELS[name], value)


def validate_stage_config(config: StageConfig, input_schema: Optional[Schema]) -> Schema:
    """
    Validate the stage and return its parsed output schema.

    Raises ConfigurationError on the first problem found.
    """
    if input_schema is None:
        raise ConfigurationError("Input schema is unknown. Define schema")
    output_schema = validate_output_schema(config)

    if not config.url_field:
        raise ConfigurationError("httpURLField is a required field.")
    _require_string_field(input_schema, config.url_field, "input")

    if config.request_body_field:
        _require_string_field(input_schema, config.request_body_field, "input")

    validate_runtime_properties(config)

    if config.has_literal_credentials():
        if not config.auth_lookup:
            raise ConfigurationError("Lookup field is required to pass the required security credentials.")
        _require_string_field(input_schema, config.auth_lookup, "input")

    return output_schema


def validate_http_get_config(config: HttpGetConfig, input_schema: Optional[Schema]) -> Schema:
    """The httpget stage only needs a parseable output schema and a string URL field."""
    output_schema = Schema.parse_json(config.output_schema)
    if input_schema is not None:
        _require_string_field(input_schema, config.url_field, "input")
    return output_schema
