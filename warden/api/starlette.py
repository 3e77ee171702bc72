"""FastAPI/Starlette adapter for the idempotency guard.

Intended for synchronous endpoints, which FastAPI runs in its threadpool:

    @app.post("/orders")
    def create_order(request: Request, payload: OrderIn) -> Response:
        return use_cache(
            guard,
            request,
            lambda: JSONResponse(place_order(payload), status_code=201),
            [payload.tenant_id],
        )
"""

from collections.abc import Callable, Sequence

from fastapi import Request, Response

from warden.guard import IdempotencyGuard
from warden.models import Body, Outcome

DEFAULT_MEDIA_TYPE = "application/json"

EndpointHandler = Callable[[], Response | Outcome | tuple[int, dict[str, str], Body]]


class StarletteRequest:
    """Exposes a Starlette request as a RequestDescriptor."""

    def __init__(self, request: Request) -> None:
        self._request = request

    @property
    def method(self) -> str:
        return self._request.method.upper()

    @property
    def path(self) -> str:
        return self._request.url.path

    def header(self, name: str) -> str | None:
        return self._request.headers.get(name)


def outcome_from_response(response: Response) -> Outcome:
    """Capture the status, headers and rendered body of a response.

    Only fully rendered responses can be cached; streaming and file
    responses have no body to store.

    Raises:
        TypeError: If the response has no rendered body
    """
    if not isinstance(getattr(response, "body", None), (bytes, bytearray, memoryview)):
        raise TypeError(
            f"{type(response).__name__} has no rendered body; "
            "return a Response with its content instead"
        )
    return Outcome(response.status_code, dict(response.headers), bytes(response.body))


def to_response(outcome: Outcome) -> Response:
    """Build a response from an outcome."""
    has_content_type = any(name.lower() == "content-type" for name in outcome.headers)
    return Response(
        content=outcome.body,
        status_code=outcome.status,
        headers=outcome.headers,
        media_type=None if has_content_type else DEFAULT_MEDIA_TYPE,
    )


def use_cache(
    guard: IdempotencyGuard,
    request: Request,
    handler: EndpointHandler,
    request_identifiers: Sequence[str] = (),
    lock_duration: int | None = None,
    action: str | None = None,
) -> Response:
    """Run an endpoint body through the guard and return a response."""

    def run() -> Outcome:
        result = handler()
        if isinstance(result, Response):
            return outcome_from_response(result)
        return Outcome.coerce(result)

    outcome = guard.use_cache(
        StarletteRequest(request),
        run,
        request_identifiers,
        lock_duration=lock_duration,
        action=action,
    )
    return to_response(outcome)
