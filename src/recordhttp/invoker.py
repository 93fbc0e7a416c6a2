"""
invoker.py
----------
Executes one request and classifies the outcome into the string written to
the response field:

    200                 -> response body, decoded as UTF-8
    any other status    -> {"httperror":{"code":"<status>","message":"Error Invoking URL <url> "}}
    exception           -> {"httperror":{"code":"500","message":"Error Invoking URL <url> <error>"}}

Every call gets its own session, closed on the way out.
"""
from typing import Dict, Optional

import requests
from requests.auth import AuthBase

from .errors import HttpFailure
from .request_builder import HttpRequest
from .utils.logging import get_logger

logger = get_logger("invoker")

CONNECT_TIMEOUT = 60
READ_TIMEOUT = 60
SUCCESS_STATUS = 200
TRANSPORT_ERROR_CODE = 500


class TimeoutSession(requests.Session):
    """Session that applies a default (connect, read) timeout to every request."""

    def __init__(self, connect_timeout: float, read_timeout: float):
        super().__init__()
        self.timeout = (connect_timeout, read_timeout)

    def request(self, method, url, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        return super().request(method, url, **kwargs)


def create_session(
    headers: Optional[Dict[str, str]] = None,
    auth: Optional[AuthBase] = None,
    connect_timeout: float = CONNECT_TIMEOUT,
    read_timeout: float = READ_TIMEOUT,
) -> TimeoutSession:
    session = TimeoutSession(connect_timeout, read_timeout)
    if headers:
        session.headers.update(headers)
    session.auth = auth
    return session


def error_envelope(code, url: str, detail: str = "") -> str:
    return HttpFailure(code, f"Error Invoking URL {url} {detail}").envelope()


def execute(request: HttpRequest) -> str:
    """Return the decoded body of a 200 response; raise HttpFailure for any other status."""
    with create_session(request.headers, request.auth) as session:
        response = session.request(request.method, request.url, data=request.body)
        if response.status_code != SUCCESS_STATUS:
            raise HttpFailure(response.status_code, f"Error Invoking URL {request.url} ")
        return response.content.decode("utf-8", errors="replace")


def invoke(request: HttpRequest) -> str:
    """Run the request; failures come back as an error envelope, never as an exception."""
    try:
        body = execute(request)
    except HttpFailure as failure:
        logger.warning("%s %s returned HTTP %s", request.method, request.url, failure.code)
        return failure.envelope()
    except Exception as e:
        logger.warning("%s %s failed: %s", request.method, request.url, e)
        return error_envelope(TRANSPORT_ERROR_CODE, request.url, str(e))
    logger.debug("%s %s returned %d bytes", request.method, request.url, len(body))
    return body
