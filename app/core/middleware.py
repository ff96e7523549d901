"""
HTTP request/response logging.

Every request is logged with its method, URI, headers and payload, and every
response with its status, headers and payload. The response body is buffered
so it can be logged and then sent to the client unchanged.
"""
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, log_bodies: bool = True):
        super().__init__(app)
        self.log_bodies = log_bodies

    async def dispatch(self, request: Request, call_next):
        await self._log_request(request)
        response = await call_next(request)

        if not self.log_bodies:
            logger.info("Response: status=%s; headers=%s", response.status_code, dict(response.headers))
            return response

        content = b"".join([chunk async for chunk in response.body_iterator])
        msg = f"Response: status={response.status_code}; headers={dict(response.headers)}"
        if content:
            msg += f"; payload={content.decode('utf-8', errors='replace')}"
        logger.info(msg)

        return Response(
            content=content,
            status_code=response.status_code,
            headers=dict(response.headers),
            background=response.background,
        )

    async def _log_request(self, request: Request) -> None:
        uri = request.url.path
        if request.url.query:
            uri += f"?{request.url.query}"
        msg = f"Request: method={request.method}; uri={uri}; headers={dict(request.headers)}"
        if self.log_bodies:
            body = await request.body()
            if body:
                msg += f"; payload={body.decode('utf-8', errors='replace')}"
        logger.info(msg)
