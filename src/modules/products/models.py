"""Product entity as exposed by ``/produtos/``.

``price`` travels as a string on the wire and is parsed to ``Decimal``;
``stock_quantity`` is a plain int.  The stock figure held here is a
snapshot: the remote store is the only source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from shared.domain.money import to_decimal, to_wire
from shared.domain.timestamps import parse_timestamp


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    price: Decimal
    stock_quantity: int
    description: Optional[str] = None
    category: Optional[str] = None
    registered_at: Optional[datetime] = None

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> Product:
        registered = payload.get("data_cadastro")
        return cls(
            id=int(payload["id"]),
            name=payload["nome"],
            price=to_decimal(payload["preco"]),
            stock_quantity=int(payload.get("quantidade_estoque") or 0),
            description=payload.get("descricao"),
            category=payload.get("categoria"),
            registered_at=parse_timestamp(registered),
        )

    def to_api(self) -> Dict[str, Any]:
        return {
            "nome": self.name,
            "descricao": self.description,
            "preco": to_wire(self.price),
            "quantidade_estoque": self.stock_quantity,
            "categoria": self.category,
        }

    def __str__(self) -> str:
        return f"{self.name} (R$ {self.price}) - Estoque: {self.stock_quantity}"
