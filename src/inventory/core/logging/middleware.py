"""
Request ID middleware.

Uses the caller's `X-Request-ID` when it looks sane, otherwise generates a
UUID4. The id is stored in the logging contextvar for the duration of the
request and echoed back on the response.
"""

import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import reset_request_id, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# Printable token, bounded length; keeps newlines and control chars out of log lines
_ACCEPTABLE_ID = re.compile(r"^[A-Za-z0-9._:\-]{1,128}$")


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get(REQUEST_ID_HEADER)
        rid = incoming if incoming and _ACCEPTABLE_ID.fullmatch(incoming) else str(uuid.uuid4())

        token = set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)
