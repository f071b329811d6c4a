"""Error taxonomy shared by every console module.

- ``ValidationError``: bad input detected locally.  Raised before any
  network call is made.
- ``RemoteError``: any failed call to the remote store, tagged with the
  operation that failed.
- ``PartialSuccess``: the first half of a coupled operation succeeded and
  the dependent half failed.  Both halves are kept apart.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

GENERIC_REMOTE_MESSAGE = "Falha na comunicação com a API."


class ValidationError(Exception):
    """Client-detectable bad input (non-positive quantity, stock exceeded...)."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class RemoteError(Exception):
    """A call to the remote store failed.

    ``messages`` holds the structured detail list returned by the API
    (possibly empty); ``message`` is the single user-facing string.
    """

    def __init__(
        self,
        operation: str,
        messages: Optional[Sequence[str]] = None,
        status_code: Optional[int] = None,
        fallback: str = GENERIC_REMOTE_MESSAGE,
    ) -> None:
        self.operation = operation
        self.messages: List[str] = [m for m in (messages or []) if m]
        self.status_code = status_code
        self.message = ", ".join(self.messages) if self.messages else fallback
        super().__init__(f"{operation}: {self.message}")

    @classmethod
    def from_payload(
        cls,
        operation: str,
        payload: Any,
        status_code: Optional[int] = None,
        fallback: str = GENERIC_REMOTE_MESSAGE,
    ) -> RemoteError:
        """Build the error from an API error body.

        ``{"detail": [{"msg": ...}, ...]}`` yields one message per entry,
        ``{"detail": "..."}`` yields that string, anything else falls back
        to the generic message.
        """
        return cls(
            operation,
            messages=extract_messages(payload),
            status_code=status_code,
            fallback=fallback,
        )


class PartialSuccess(Exception):
    """A coupled operation completed only halfway.

    ``result`` is what the successful half produced (e.g. the created
    sale); ``error`` is the ``RemoteError`` of the half that failed.
    """

    def __init__(self, operation: str, result: Any, error: RemoteError) -> None:
        self.operation = operation
        self.result = result
        self.error = error
        super().__init__(f"{operation} succeeded, but {error.operation} failed: {error.message}")


def extract_messages(payload: Any) -> List[str]:
    """Return the user-facing messages carried by an API error body."""
    if not isinstance(payload, dict):
        return []
    detail = payload.get("detail")
    if isinstance(detail, str):
        return [detail] if detail.strip() else []
    if isinstance(detail, list):
        messages = []
        for entry in detail:
            if isinstance(entry, dict) and isinstance(entry.get("msg"), str):
                messages.append(entry["msg"])
            elif isinstance(entry, str):
                messages.append(entry)
        return messages
    return []
