"""HTTP gateway shared by the admin, doctor and patient sessions."""

from typing import Any, Awaitable, Callable, Dict, Iterable, Optional
import logging

import httpx

from .errors import (
    ApiResult, NetworkUnreachable, ServerRejected, Unclassified
)
from .notifications import NotificationSink

logger = logging.getLogger(__name__)


class ApiCall:
    """One outbound request as seen by middlewares."""

    __slots__ = ("method", "path", "body", "headers", "action", "expect", "rejected")

    def __init__(
        self,
        method: str,
        path: str,
        body: Optional[dict],
        headers: Dict[str, str],
        action: str,
        expect: Optional[str] = None,
        rejected: Optional[str] = None,
    ):
        self.method = method
        self.path = path
        self.body = body
        self.headers = headers
        self.action = action
        self.expect = expect
        self.rejected = rejected

    def __repr__(self):
        return f"<ApiCall {self.method} {self.path}>"


Handler = Callable[[ApiCall], Awaitable[ApiResult]]
Middleware = Callable[[ApiCall, Handler], Awaitable[ApiResult]]


def _bind(middleware: Middleware, call_next: Handler) -> Handler:
    async def handler(call: ApiCall) -> ApiResult:
        return await middleware(call, call_next)
    return handler


# Shape a successful payload must have under each expected key
PAYLOAD_SHAPES = {
    "token": str,
    "doctors": list,
    "appointments": list,
    "dashData": dict,
    "profileData": dict,
    "userData": dict,
}


def rejected_message(action: str) -> str:
    return f"Error {action}"


def has_expected_payload(data: Dict[str, Any], key: str) -> bool:
    """True when ``key`` is present and its value has the shape callers rely on."""
    if key not in data:
        return False
    shape = PAYLOAD_SHAPES.get(key)
    if shape is None:
        return True
    value = data[key]
    if not isinstance(value, shape):
        return False
    # An empty credential cannot start a session
    return shape is not str or bool(value)


def fallback_message(action: str) -> str:
    return f"An error occurred while {action}"


class ApiGatewayClient:
    """Issues authenticated calls and turns every outcome into an ``ApiResult``.

    ``token_header`` is the role-specific header that carries the
    credential next to the standard ``Authorization: Bearer`` header.
    Middlewares wrap every call in the order given, outermost first.
    Failures are reported to ``sink`` once each and returned, never raised.
    """

    def __init__(
        self,
        base_url: str,
        token_header: str,
        sink: NotificationSink,
        middlewares: Iterable[Middleware] = (),
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_header = token_header
        self.sink = sink
        self.timeout = timeout
        self.transport = transport
        self.middlewares = tuple(middlewares)

        handler: Handler = self._send
        for middleware in reversed(self.middlewares):
            handler = _bind(middleware, handler)
        self._handler = handler

    def build_headers(self, credential: Optional[str]) -> Dict[str, str]:
        """Credential headers for both the legacy and the bearer convention."""
        if not credential:
            return {}
        return {
            self.token_header: credential,
            "Authorization": f"Bearer {credential}",
        }

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        credential: Optional[str] = None,
        *,
        action: str,
        expect: Optional[str] = None,
        rejected: Optional[str] = None,
        announce: bool = False,
    ) -> ApiResult:
        """Issue one call.

        ``action`` phrases the operation for default messages
        ("fetching doctors"). ``expect`` names a payload key a successful
        response must carry, in the shape ``PAYLOAD_SHAPES`` gives it.
        ``rejected`` replaces the "Error <action>" default used when the
        server rejects without a message. With ``announce`` the server's
        message on success is passed to the sink.
        """
        call = ApiCall(
            method.upper(), path, body, self.build_headers(credential), action, expect, rejected
        )
        result = await self._handler(call)

        if result.ok:
            message = result.get("message")
            if announce and message:
                self.sink.notify_success(message)
        else:
            logger.warning(f"{call.method} {call.path} failed ({result.error.kind}): {result.error.message}")
            self.sink.notify_error(result.error.message)

        return result

    async def _send(self, call: ApiCall) -> ApiResult:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(
                    call.method,
                    call.path,
                    json=call.body,
                    headers=call.headers,
                )
        except httpx.TransportError as e:
            logger.debug(f"Transport failure on {call.path}: {e!r}")
            return ApiResult.failure(NetworkUnreachable())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"Request failure on {call.path}: {e!r}")
            return ApiResult.failure(Unclassified(fallback_message(call.action)))

        return classify_response(call, response)


def classify_response(call: ApiCall, response: httpx.Response) -> ApiResult:
    """Map a response that did arrive onto success or a classified failure."""
    status = response.status_code
    try:
        data = response.json()
    except ValueError:
        data = None

    if not isinstance(data, dict):
        return ApiResult.failure(Unclassified(fallback_message(call.action), status))

    success = data.get("success")
    if response.is_success and success is True:
        if call.expect and not has_expected_payload(data, call.expect):
            return ApiResult.failure(Unclassified(fallback_message(call.action), status))
        return ApiResult.success(data)

    if success is False or not response.is_success:
        message = data.get("message")
        if not isinstance(message, str) or not message:
            message = call.rejected or rejected_message(call.action)
        return ApiResult.failure(ServerRejected(message, status))

    # A 2xx body without a success flag
    return ApiResult.failure(Unclassified(fallback_message(call.action), status))
