"""Customer reference as exposed by ``/clientes/``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Customer:
    id: int
    name: str

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> Customer:
        return cls(id=int(payload["id"]), name=payload.get("nome") or "")

    def __str__(self) -> str:
        return self.name
