"""
schema.py
---------
Record schema model. Parses the Avro-style JSON layout the host uses to
describe records:

    {"type": "record", "name": "output",
     "fields": [{"name": "url", "type": "string"},
                {"name": "code", "type": ["string", "null"]}]}
"""
import json
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ValidationError

from .errors import ConfigurationError

STRING = "string"
NULL = "null"


def _type_name(field_type: Any) -> str:
    if isinstance(field_type, dict):
        return field_type.get("type", "unknown")
    return str(field_type)


class Field(BaseModel):
    name: str
    type: Union[str, dict, list]

    model_config = {"frozen": True}

    @property
    def nullable(self) -> bool:
        return isinstance(self.type, list) and NULL in self.type

    @property
    def base_type(self) -> str:
        """Type name with a nullable union unwrapped."""
        if isinstance(self.type, list):
            non_null = [t for t in self.type if t != NULL]
            if len(non_null) == 1:
                return _type_name(non_null[0])
            return "union"
        return _type_name(self.type)

    @classmethod
    def of(cls, name: str, field_type: str = STRING, nullable: bool = False) -> "Field":
        return cls(name=name, type=[field_type, NULL] if nullable else field_type)


class Schema(BaseModel):
    name: str = "etlSchemaBody"
    type: str = "record"
    fields: List[Field]

    model_config = {"frozen": True}

    def get_field(self, name: str) -> Optional[Field]:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def record_of(cls, name: str, *fields: Field) -> "Schema":
        return cls(name=name, fields=list(fields))

    @classmethod
    def parse_json(cls, text: str) -> "Schema":
        """Parse a schema from JSON text, raising ConfigurationError when it is not a record schema."""
        if text is None or not str(text).strip():
            raise ConfigurationError("Schema is unknown. Define schema")
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Schema cannot be parsed: {e}") from e
        return cls.parse_obj_checked(raw)

    @classmethod
    def parse_obj_checked(cls, raw: Any) -> "Schema":
        if not isinstance(raw, dict) or raw.get("type", "record") != "record":
            raise ConfigurationError("Schema must be a JSON object of type 'record'")
        try:
            schema = cls.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError(f"Schema cannot be parsed: {e}") from e
        names = schema.field_names
        if len(names) != len(set(names)):
            raise ConfigurationError(f"Schema has duplicate field names: {names}")
        return schema
