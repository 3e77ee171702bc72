"""Web framework adapters.

Exports the FastAPI/Starlette shim that translates between live requests
and responses and the guard's plain data.
"""

from warden.api.starlette import (
    StarletteRequest,
    outcome_from_response,
    to_response,
    use_cache,
)

__all__ = [
    "StarletteRequest",
    "outcome_from_response",
    "to_response",
    "use_cache",
]
