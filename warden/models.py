"""Plain data exchanged between the guard and its host framework."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import NamedTuple, Protocol, runtime_checkable

from pydantic import BaseModel

Body = bytes | str


class Outcome(NamedTuple):
    """The (status, headers, body) triple of one operation."""

    status: int
    headers: dict[str, str]
    body: Body

    @classmethod
    def coerce(cls, value: "Outcome | tuple[int, Mapping[str, str], Body]") -> "Outcome":
        """Normalize a handler result into an Outcome with its own headers dict."""
        status, headers, body = value
        return cls(int(status), dict(headers or {}), body)

    def with_header(self, name: str, value: str) -> "Outcome":
        """Return a copy with one header set, leaving this outcome untouched.

        Header names compare case-insensitively, so an existing entry under
        any spelling of name is replaced.
        """
        headers = {k: v for k, v in self.headers.items() if k.lower() != name.lower()}
        headers[name] = value
        return self._replace(headers=headers)


@runtime_checkable
class RequestDescriptor(Protocol):
    """What the guard needs to know about an inbound operation."""

    @property
    def method(self) -> str: ...

    @property
    def path(self) -> str: ...

    def header(self, name: str) -> str | None: ...


@dataclass
class SimpleRequest:
    """Framework-free RequestDescriptor with case-insensitive header lookup."""

    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        self._lowered = {k.lower(): v for k, v in self.headers.items()}

    def header(self, name: str) -> str | None:
        return self._lowered.get(name.lower())


class ErrorDetail(BaseModel):
    """One entry of an error response body."""

    code: str | None = None
    """Machine-readable error code, if any."""

    message: str
    """Human-readable error description."""


class ErrorResponse(BaseModel):
    """Error body returned with the 409 conflict outcome."""

    errors: list[ErrorDetail]


DEFAULT_CONCURRENT_ERROR = ErrorResponse(
    errors=[ErrorDetail(message="Request conflicts with another likely concurrent request.")]
).model_dump_json(exclude_none=True)
