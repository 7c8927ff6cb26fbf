"""Request correlation ids.

The id for one HTTP call is taken from the caller's ``X-Request-ID`` header
when it is well formed, and generated otherwise. It lives in a context
variable so every log line emitted while serving the call carries it, and is
echoed back on the response.
"""

import re
import uuid
from contextvars import ContextVar, Token
from typing import Optional

REQUEST_ID_HEADER = "X-Request-ID"

# Caller-supplied ids end up in log lines; anything else is replaced
_ACCEPTED_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:\-]{1,128}$")

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def request_id_from_header(value: Optional[str]) -> str:
    """Reuse a well-formed incoming id, or generate a new UUID4 one."""
    if value and _ACCEPTED_REQUEST_ID.match(value):
        return value
    return str(uuid.uuid4())


def get_request_id() -> str:
    return request_id_var.get() or "no-request-id"


def bind_request_id(request_id: str) -> Token:
    """Bind the id to the current context; pass the token to ``reset_request_id``."""
    return request_id_var.set(request_id)


def reset_request_id(token: Token) -> None:
    request_id_var.reset(token)
