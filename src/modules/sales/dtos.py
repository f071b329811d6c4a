"""Sale DTOs for the Service Layer.

Pydantic v2 input contracts.  DTOs are immutable (``frozen=True``) and
serialize to the ``/vendas/`` wire shape (amounts as strings).

- ``CreateSaleDTO``: input for sale registration.
- ``UpdateSaleDTO``: input for partial updates; the order link is not
  part of it, so it cannot be changed after creation.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.sales.constants import PaymentMethod
from shared.domain.money import to_wire


class CreateSaleDTO(BaseModel):
    """Immutable DTO for sale creation requests.

    Validates:
    - ``order_id`` is positive.
    - ``amount`` is not negative; ``None`` means "take the order total".
    - ``payment_method`` is one of ``PaymentMethod``.
    """

    model_config = ConfigDict(frozen=True)

    order_id: int
    amount: Optional[Decimal] = None
    payment_method: PaymentMethod
    staff_id: Optional[int] = None

    @field_validator("order_id")
    @classmethod
    def order_must_be_selected(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Selecione um pedido para registrar a venda.")
        return v

    @field_validator("amount")
    @classmethod
    def amount_must_not_be_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Amount cannot be negative.")
        return v

    def to_api(self) -> Dict[str, Any]:
        return {
            "pedido_id": self.order_id,
            "funcionario_id": self.staff_id,
            "valor_total": to_wire(self.amount),
            "forma_pagamento": self.payment_method.value,
        }


class UpdateSaleDTO(BaseModel):
    """Immutable DTO for sale update requests.

    All fields are optional; only supplied fields are sent.  Unknown
    fields (``order_id`` included) are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    amount: Optional[Decimal] = None
    payment_method: Optional[PaymentMethod] = None
    staff_id: Optional[int] = None

    @field_validator("amount")
    @classmethod
    def amount_must_not_be_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Amount cannot be negative.")
        return v

    def to_api(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.amount is not None:
            payload["valor_total"] = to_wire(self.amount)
        if self.payment_method is not None:
            payload["forma_pagamento"] = self.payment_method.value
        if self.staff_id is not None:
            payload["funcionario_id"] = self.staff_id
        return payload
