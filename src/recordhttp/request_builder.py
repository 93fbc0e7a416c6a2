"""
request_builder.py
------------------
Assembles the outgoing request for one record: URL, static headers, the
record-driven Authorization token and host-scoped basic auth.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import urlparse

from requests.auth import HTTPBasicAuth

from .errors import ConfigurationError
from .stage_config import BODY_METHODS, StageConfig

AUTHORIZATION = "Authorization"


def host_of(url: str) -> Optional[str]:
    """Hostname of url, or None when it has none or it does not parse (e.g. "http://[::1/x")."""
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


def parse_headers(text: Optional[str]) -> Dict[str, str]:
    """
    Parse "key:value,key:value" into an ordered dict.

    Each entry is split on its first colon, so values may contain colons
    (e.g. "Accept:application/json,X-Origin:http://a"). Blank entries are
    ignored.
    """
    headers: Dict[str, str] = {}
    if not text:
        return headers
    for entry in text.split(","):
        if not entry.strip():
            continue
        key, sep, value = entry.partition(":")
        key = key.strip()
        if not sep or not key:
            raise ConfigurationError(
                f"Header '{entry.strip()}' is not of the form key:value."
            )
        headers[key] = value.strip()
    return headers


class HostScopedBasicAuth(HTTPBasicAuth):
    """Basic auth that is only attached to requests for one host."""

    def __init__(self, username: str, password: str, host: Optional[str]):
        super().__init__(username, password)
        self.host = host.lower() if host else None

    def __eq__(self, other):
        return super().__eq__(other) and self.host == getattr(other, "host", None)

    def __ne__(self, other):
        return not self == other

    def applies_to(self, url: str) -> bool:
        hostname = host_of(url)
        return self.host is not None and hostname is not None and hostname.lower() == self.host

    def __call__(self, r):
        if self.applies_to(r.url):
            return super().__call__(r)
        return r


@dataclass(frozen=True)
class HttpRequest:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    auth: Optional[HostScopedBasicAuth] = None
    body: Optional[str] = None


def build_request(
    config: StageConfig,
    url: str,
    username: Optional[str],
    password: Optional[str],
    token: Optional[str],
    static_headers: Dict[str, str],
    body: Optional[str] = None,
) -> HttpRequest:
    # Static headers go first so that a record-driven token replaces a
    # static Authorization header.
    headers = dict(static_headers)
    auth = None
    if token is not None:
        for name in [k for k in headers if k.lower() == AUTHORIZATION.lower()]:
            del headers[name]
        headers[AUTHORIZATION] = token
    elif username is not None:
        auth = HostScopedBasicAuth(username, password or "", host_of(url))

    method = config.method
    return HttpRequest(
        method=method,
        url=url,
        headers=headers,
        auth=auth,
        body=body if method in BODY_METHODS else None,
    )
