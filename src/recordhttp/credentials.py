"""
credentials.py
--------------
Record-driven credentials. Each credential kind (username, password,
auth token) is configured as a JSON object mapping a lookup key to a
secret, e.g. {"291": "345f45", "415": "4fd56"}. The key is read per record
from the configured lookup field.
"""
import json
from typing import Dict, Iterator, Mapping, Optional

from .errors import ConfigurationError
from .utils.logging import get_logger

logger = get_logger("credentials")


class CredentialMap(Mapping):
    """Read-only lookup key -> secret mapping, parsed once per run."""

    def __init__(self, kind: str, entries: Dict[str, str]):
        self.kind = kind
        self._entries = dict(entries)

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        # Secrets stay out of logs and tracebacks.
        return f"CredentialMap(kind={self.kind!r}, keys={sorted(self._entries)!r})"

    @classmethod
    def parse(cls, kind: str, text: Optional[str]) -> Optional["CredentialMap"]:
        """Parse a JSON object string. Returns None when the kind is not configured."""
        if text is None or not text.strip():
            return None
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"{kind} is not a valid JSON. Refer to documentation for details."
            ) from e
        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"{kind} must be a JSON object mapping lookup values to credentials."
            )
        return cls(kind, {str(k): str(v) for k, v in raw.items() if v is not None})


def resolve(credential_map: Optional[CredentialMap], lookup_value: Optional[str]) -> Optional[str]:
    """
    Look up the secret for one record.

    Returns None when the credential kind is unused, and also when the key is
    absent; the latter is logged as a warning and the request goes out
    without that credential.
    """
    if credential_map is None:
        return None
    if lookup_value is None or lookup_value not in credential_map:
        logger.warning("Unable to find %s for lookup value %r", credential_map.kind, lookup_value)
        return None
    return credential_map[lookup_value]
