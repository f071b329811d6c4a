"""HTTP client for the TalkStoque API.

Every call:

* carries ``Authorization: Bearer <token>`` when the session holds one;
* carries an ``X-Request-ID`` correlation id, also bound into structlog
  context vars so every log line of the call can be traced;
* turns transport failures and non-2xx responses into ``RemoteError``
  tagged with the operation name;
* clears the session on ``401``.

No call is ever retried.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, Dict, Optional

import requests
import structlog

from modules.core.exceptions import GENERIC_REMOTE_MESSAGE, RemoteError

if TYPE_CHECKING:
    from modules.core.session import SessionContext

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ApiClient:
    """Thin wrapper around ``requests.Session`` bound to one base URL."""

    def __init__(
        self,
        base_url: str,
        session: Optional[SessionContext] = None,
        timeout: float = 10.0,
        http: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._timeout = timeout
        self._http = http or requests.Session()
        self._http.headers.update({"Content-Type": "application/json"})

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def get(self, operation: str, path: str, params: Optional[Dict[str, Any]] = None, **kw: Any) -> Any:
        return self.request(operation, "GET", path, params=params, **kw)

    def post(self, operation: str, path: str, json: Any = None, **kw: Any) -> Any:
        return self.request(operation, "POST", path, json=json, **kw)

    def put(self, operation: str, path: str, json: Any = None, **kw: Any) -> Any:
        return self.request(operation, "PUT", path, json=json, **kw)

    def delete(self, operation: str, path: str, **kw: Any) -> Any:
        return self.request(operation, "DELETE", path, **kw)

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    def request(
        self,
        operation: str,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        fallback: str = GENERIC_REMOTE_MESSAGE,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Returns ``None`` for empty bodies (e.g. ``204 No Content``).

        Raises:
            RemoteError: transport failure or non-2xx status.
        """
        cid = str(uuid.uuid4())
        request_headers = {REQUEST_ID_HEADER: cid}
        token = self._session.token if self._session else None
        if token:
            request_headers["Authorization"] = f"Bearer {token}"
        if headers:
            request_headers.update(headers)

        url = f"{self._base_url}/{path.lstrip('/')}"
        with structlog.contextvars.bound_contextvars(correlation_id=cid):
            log = logger.bind(operation=operation, method=method, path=path)
            log.debug("api.request_started", params=params)
            try:
                response = self._http.request(
                    method,
                    url,
                    params=_clean(params),
                    json=json,
                    data=data,
                    headers=request_headers,
                    timeout=self._timeout,
                )
            except requests.RequestException as exc:
                log.error("api.request_failed", error=str(exc))
                raise RemoteError(operation, fallback=fallback) from exc

            if response.status_code == 401 and self._session is not None:
                log.warning("api.unauthorized")
                self._session.clear()

            if not response.ok:
                payload = _decode(response)
                error = RemoteError.from_payload(
                    operation,
                    payload,
                    status_code=response.status_code,
                    fallback=fallback,
                )
                log.warning(
                    "api.request_rejected",
                    status_code=response.status_code,
                    detail=error.message,
                )
                raise error

            log.debug("api.request_finished", status_code=response.status_code)
            return _decode(response)


def _clean(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Drop ``None`` / blank query parameters."""
    if not params:
        return None
    return {
        key: value
        for key, value in params.items()
        if value is not None and not (isinstance(value, str) and not value.strip())
    }


def _decode(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
