"""Product DTOs for the Service Layer.

Pydantic v2 input contracts for the inventory screens.  DTOs are
immutable (``frozen=True``) and serialize themselves to the wire shape
expected by ``/produtos/``.

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, field_validator

from shared.domain.money import to_wire


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is a non-empty string.
    - ``price`` is not negative.
    - ``stock_quantity`` is not negative.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    stock_quantity: int
    description: str | None = None
    category: str | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v

    def to_api(self) -> Dict[str, Any]:
        return {
            "nome": self.name,
            "descricao": self.description,
            "preco": to_wire(self.price),
            "quantidade_estoque": self.stock_quantity,
            "categoria": self.category,
        }


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields are sent.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    price: Decimal | None = None
    stock_quantity: int | None = None
    description: str | None = None
    category: str | None = None

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v

    def to_api(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.name is not None:
            payload["nome"] = self.name
        if self.description is not None:
            payload["descricao"] = self.description
        if self.price is not None:
            payload["preco"] = to_wire(self.price)
        if self.stock_quantity is not None:
            payload["quantidade_estoque"] = self.stock_quantity
        if self.category is not None:
            payload["categoria"] = self.category
        return payload
