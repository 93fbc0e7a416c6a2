"""
http_stage.py
-------------
Implements HttpTransform: one HTTP call per input record, with the result
written to the configured response field of the output record.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .base import BaseStage, Emitter
from ..credentials import CredentialMap, resolve
from ..errors import ConfigurationError, HttpFailure, MissingFieldError
from ..invoker import invoke
from ..merger import merge
from ..request_builder import build_request, parse_headers
from ..schema import Schema
from ..stage_config import StageConfig
from ..utils.config_validation import (
    CREDENTIAL_LABELS,
    validate_output_schema,
    validate_runtime_properties,
    validate_stage_config,
)
from ..utils.logging import get_logger

logger = get_logger("stages.http")

MISSING_FIELD_CODE = 400


@dataclass(frozen=True)
class _RunState:
    config: StageConfig
    output_schema: Schema
    headers: Dict[str, str]
    usernames: Optional[CredentialMap]
    passwords: Optional[CredentialMap]
    tokens: Optional[CredentialMap]


class HttpTransform(BaseStage):
    config_class = StageConfig

    def __init__(self, config: StageConfig):
        self.config = config
        self._run: Optional[_RunState] = None

    def configure_pipeline(self, input_schema):
        # An unknown input schema is only known at run time; validate what we can.
        if input_schema is None:
            output_schema = validate_output_schema(self.config)
            validate_runtime_properties(self.config)
            return output_schema
        return validate_stage_config(self.config, input_schema)

    def initialize(self, arguments=None):
        config = self.config.resolve_macros(arguments)
        output_schema = validate_output_schema(config)
        validate_runtime_properties(config)
        if config.has_credentials() and not config.auth_lookup:
            raise ConfigurationError("Lookup field is required to pass the required security credentials.")

        self._run = _RunState(
            config=config,
            output_schema=output_schema,
            headers=parse_headers(config.headers),
            usernames=CredentialMap.parse(CREDENTIAL_LABELS["username"], config.username),
            passwords=CredentialMap.parse(CREDENTIAL_LABELS["password"], config.password),
            tokens=CredentialMap.parse(CREDENTIAL_LABELS["auth_token"], config.auth_token),
        )
        logger.info(
            "Initialized HTTP stage: %s from field '%s' into '%s'",
            config.method, config.url_field, config.response_field,
        )

    @property
    def output_schema(self) -> Schema:
        return self._state().output_schema

    def _state(self) -> _RunState:
        if self._run is None:
            raise RuntimeError("HttpTransform.initialize() must be called before transform()")
        return self._run

    def _get_url(self, record: Dict[str, Any]) -> str:
        url_field = self._state().config.url_field
        url = record.get(url_field)
        if url is None:
            raise MissingFieldError(url_field)
        return url

    def call(self, record: Dict[str, Any]) -> str:
        """Invoke the endpoint for one record and return the response field value."""
        run = self._state()
        config = run.config
        try:
            url = self._get_url(record)
        except MissingFieldError as e:
            logger.warning("Skipping HTTP call: %s", e)
            return error_for_missing_field(e)

        lookup = record.get(config.auth_lookup) if config.auth_lookup else None
        request = build_request(
            config,
            url,
            username=resolve(run.usernames, lookup),
            password=resolve(run.passwords, lookup),
            token=resolve(run.tokens, lookup),
            static_headers=run.headers,
            body=record.get(config.request_body_field) if config.request_body_field else None,
        )
        return invoke(request)

    def transform(self, record, emitter: Emitter):
        run = self._state()
        response = self.call(record)
        emitter.emit(merge(record, response, run.output_schema, run.config.response_field))


def error_for_missing_field(error: MissingFieldError) -> str:
    return HttpFailure(MISSING_FIELD_CODE, str(error)).envelope()
