"""Fingerprint generation for idempotent operations.

A fingerprint identifies one logical operation attempt. It is derived from
the client's idempotency token, the operation path and method, and an
ordered sequence of caller-supplied discriminators (tenant id, resource id).
"""

import base64
import hashlib
import secrets
from collections.abc import Iterable

from warden.models import RequestDescriptor

IDEMPOTENCY_HEADER = "Idempotency-Key"

_DOUBLE_QUOTE = '"'


def fingerprint(
    token: str,
    path: str,
    method: str,
    discriminators: Iterable[str] = (),
) -> str:
    """Compute the fingerprint of an operation.

    Each part is framed by its byte length before hashing so that shifting
    characters between adjacent parts yields a different digest.

    Args:
        token: Idempotency token for this attempt
        path: Operation path
        method: Operation method (uppercase verb)
        discriminators: Caller-supplied identifiers, order is significant

    Returns:
        Base64-encoded SHA-256 digest (44 characters)
    """
    digest = hashlib.sha256()
    for part in (token, path, method, *discriminators):
        encoded = part.encode("utf-8")
        digest.update(len(encoded).to_bytes(8, "big"))
        digest.update(encoded)
    return base64.b64encode(digest.digest()).decode("ascii")


def unquote(value: str) -> str:
    """Strip one surrounding pair of double quotes, if present."""
    if len(value) >= 2 and value.startswith(_DOUBLE_QUOTE) and value.endswith(_DOUBLE_QUOTE):
        return value[1:-1]
    return value


def generate_token() -> str:
    """Generate a random idempotency token."""
    return secrets.token_hex(16)


def resolve_token(request: RequestDescriptor) -> str:
    """Return the client-supplied idempotency token, or a fresh one."""
    raw = request.header(IDEMPOTENCY_HEADER)
    if raw is None:
        return generate_token()
    return unquote(raw)
