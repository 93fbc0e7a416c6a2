"""
stage_config.py
---------------
Immutable properties of one HTTP stage, created once per run.

Property aliases follow the pipeline JSON the stage is deployed with
(httpURLField, responseField, authLookup, ...); the snake_case names are
accepted as well.
"""
import re
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

MACRO_PATTERN = re.compile(r"\$\{([^${}]+)\}")

SUPPORTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")
BODY_METHODS = ("POST", "PUT", "PATCH")

# Properties whose value may be deferred to run time.
MACRO_ENABLED = ("http_method", "headers", "username", "password", "auth_token")


def contains_macro(value: Optional[str]) -> bool:
    return value is not None and MACRO_PATTERN.search(value) is not None


def substitute_macros(value: str, arguments: Dict[str, str]) -> str:
    def replace(match):
        name = match.group(1)
        if name not in arguments:
            raise ConfigurationError(f"Macro '{name}' is not defined in the runtime arguments")
        return str(arguments[name])

    return MACRO_PATTERN.sub(replace, value)


class StageProperties(BaseModel):
    """Common base: immutable, aliased, and strict about unknown properties."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    url_field: str = Field(alias="httpURLField")
    output_schema: str = Field(alias="schema")

    @classmethod
    def from_properties(cls, properties: Dict[str, Optional[str]]):
        try:
            return cls.model_validate(properties)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid stage properties: {e}") from e


class HttpGetConfig(StageProperties):
    """Properties of the httpget stage: the URL field and the output schema, nothing else."""


class StageConfig(StageProperties):
    http_method: str = Field(default="GET", alias="httpMethod")
    headers: Optional[str] = None
    request_body_field: Optional[str] = Field(default=None, alias="requestBody")
    response_field: str = Field(alias="responseField")
    username: Optional[str] = None
    password: Optional[str] = None
    auth_token: Optional[str] = Field(default=None, alias="authToken")
    auth_lookup: Optional[str] = Field(default=None, alias="authLookup")

    @field_validator("headers", "username", "password", "auth_token", "auth_lookup", "request_body_field")
    @classmethod
    def _blank_is_unset(cls, v):
        if v is not None and not v.strip():
            return None
        return v

    @property
    def method(self) -> str:
        return self.http_method.strip().upper()

    @property
    def credential_maps(self) -> Dict[str, Optional[str]]:
        return {"username": self.username, "password": self.password, "auth_token": self.auth_token}

    def has_credentials(self) -> bool:
        return any(v is not None and v.strip() for v in self.credential_maps.values())

    def has_literal_credentials(self) -> bool:
        """True when any credential map is set and known now, not deferred to run time."""
        return any(v is not None and not contains_macro(v) for v in self.credential_maps.values())

    def resolve_macros(self, arguments: Optional[Dict[str, str]] = None) -> "StageConfig":
        """Return a copy with every ${name} replaced from the runtime arguments."""
        arguments = arguments or {}
        updates = {}
        for name in MACRO_ENABLED:
            value = getattr(self, name)
            if contains_macro(value):
                updates[name] = substitute_macros(value, arguments)
        if not updates:
            return self
        return self.model_copy(update=updates)
