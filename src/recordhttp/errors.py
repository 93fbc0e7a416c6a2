"""
errors.py
---------
Exception taxonomy for the HTTP stage.

Only ConfigurationError escapes the stage, and only at deploy, validate or
initialize time. MissingFieldError and HttpFailure are raised and handled
inside the per-record path and end up as error envelopes in the output.
"""
import json


class RecordHttpError(Exception):
    pass


class ConfigurationError(RecordHttpError, ValueError):
    """Stage properties or schemas are invalid. Aborts stage activation."""


class MissingFieldError(RecordHttpError):
    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Input Record does not contain field {field_name}")


class HttpFailure(RecordHttpError):
    """A failed invocation, carried downstream as data."""

    def __init__(self, code, message: str):
        self.code = str(code)
        self.message = message
        super().__init__(message)

    def envelope(self) -> str:
        return json.dumps(
            {"httperror": {"code": self.code, "message": self.message}},
            separators=(",", ":"),
            ensure_ascii=False,
        )
