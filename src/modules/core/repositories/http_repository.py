"""Base repository backed by the TalkStoque REST API.

Concrete repositories declare the collection path (``/pedidos/``), the
operation label used in error messages and how to build the entity from
a JSON payload (``entity.from_api``).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar

import structlog

from modules.core.exceptions import RemoteError
from modules.core.http import ApiClient
from modules.core.repositories.interfaces import IRepository

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class HttpRepository(IRepository[T]):
    """Shared GET/list/DELETE plumbing for one API collection."""

    resource: str = ""
    entity_label: str = ""
    entity: Type[T]

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def collection_path(self) -> str:
        return f"/{self.resource}/"

    def item_path(self, id: int) -> str:
        return f"/{self.resource}/{id}"

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[T]:
        try:
            payload = self._api.get(
                f"get_{self.entity_label}",
                self.item_path(id),
                fallback=f"Falha ao carregar {self.entity_label} {id}.",
            )
        except RemoteError as exc:
            if exc.status_code == 404:
                return None
            raise
        return self._build(payload)

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        payload = self._api.get(
            f"list_{self.resource}",
            self.collection_path,
            params=filters,
            fallback=f"Falha ao carregar {self.resource}.",
        )
        if not isinstance(payload, list):
            logger.warning(
                "repository.unexpected_payload",
                resource=self.resource,
                payload_type=type(payload).__name__,
            )
            return []
        return [self._build(item) for item in payload]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def delete(self, id: int) -> None:
        self._api.delete(
            f"delete_{self.entity_label}",
            self.item_path(id),
            fallback=f"Falha ao deletar {self.entity_label} {id}.",
        )

    def _create(self, payload: Dict[str, Any]) -> T:
        data = self._api.post(
            f"create_{self.entity_label}",
            self.collection_path,
            json=payload,
            fallback=f"Erro ao salvar {self.entity_label}.",
        )
        return self._build(data)

    def _update(self, id: int, payload: Dict[str, Any], operation: Optional[str] = None) -> T:
        data = self._api.put(
            operation or f"update_{self.entity_label}",
            self.item_path(id),
            json=payload,
            fallback=f"Erro ao atualizar {self.entity_label} {id}.",
        )
        return self._build(data)

    def _build(self, payload: Any) -> T:
        if not isinstance(payload, dict):
            raise RemoteError(
                f"decode_{self.entity_label}",
                fallback=f"Resposta inválida para {self.entity_label}.",
            )
        try:
            return self.entity.from_api(payload)  # type: ignore[attr-defined]
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(
                "repository.decode_failed",
                resource=self.resource,
                error=str(exc),
            )
            raise RemoteError(
                f"decode_{self.entity_label}",
                fallback=f"Resposta inválida para {self.entity_label}.",
            ) from exc
