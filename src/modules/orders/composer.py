"""Order composition (the "new/edit order" form without the form).

The composer owns the line items of an order that is being put
together and keeps two invariants:

- at most one line per product: adding a product that is already there
  merges the quantities;
- while the order is new, ``total == Σ(unit_price × quantity)``.

Stock checks run against the catalog snapshot the composer was loaded
with.  The snapshot is never refreshed here, so the check is best-effort:
the remote store performs the authoritative one when the order is saved.

Once an order exists server-side its lines are frozen.  Only customer,
status and total (which may then be overridden by hand) stay editable.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

import structlog

from modules.core.exceptions import ValidationError
from modules.orders.constants import INITIAL_STATE, OrderStatus
from modules.orders.exceptions import ItemQuantityLocked
from modules.orders.models import Order, OrderItem
from modules.orders.state_machine import StatusLike, coerce_status, to_wire
from modules.products.models import Product
from shared.domain.money import ZERO, to_decimal, to_wire as money_to_wire

logger = structlog.get_logger(__name__)


class OrderComposer:
    """Builds the line-item set of one order."""

    def __init__(self, catalog: Iterable[Product] = ()) -> None:
        self._catalog: Dict[int, Product] = {}
        self._items: List[OrderItem] = []
        self._order_id: Optional[int] = None
        self._customer_id: Optional[int] = None
        self._customer_name: str = ""
        self._status: OrderStatus = INITIAL_STATE
        self._order_date: Optional[date] = None
        self._total_override: Optional[Decimal] = None
        self.load_catalog(catalog)

    @classmethod
    def for_existing(cls, order: Order, catalog: Iterable[Product] = ()) -> OrderComposer:
        """Composer in edit mode for an order already stored remotely."""
        if not order.is_persisted:
            raise ValidationError("ID do pedido não encontrado para edição.", field="id")
        composer = cls(catalog)
        composer._order_id = order.id
        composer._customer_id = order.customer_id
        composer._customer_name = order.customer_name
        composer._items = list(order.items)
        composer._status = order.status
        composer._order_date = order.order_date
        composer._total_override = order.total_amount
        return composer

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_editing(self) -> bool:
        return self._order_id is not None

    @property
    def order_id(self) -> Optional[int]:
        return self._order_id

    @property
    def items(self) -> Tuple[OrderItem, ...]:
        return tuple(self._items)

    @property
    def customer_id(self) -> Optional[int]:
        return self._customer_id

    @property
    def customer_name(self) -> str:
        return self._customer_name

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def total(self) -> Decimal:
        """Total to submit: the manual override when editing, else derived."""
        if self.is_editing and self._total_override is not None:
            return self._total_override
        return self.compute_total()

    @property
    def order(self) -> Order:
        """Snapshot of the order being composed."""
        return Order(
            id=self._order_id,
            customer_id=self._customer_id,
            customer_name=self._customer_name,
            items=list(self._items),
            total_amount=self.total,
            status=self._status,
            order_date=self._order_date,
        )

    # ------------------------------------------------------------------
    # Catalog snapshot
    # ------------------------------------------------------------------

    def load_catalog(self, products: Iterable[Product]) -> None:
        """Replace the stock snapshot used for validation.

        Products that back a line keep their last known entry when the
        new snapshot does not include them.
        """
        catalog = {product.id: product for product in products}
        for item in self._items:
            if item.product_id not in catalog and item.product_id in self._catalog:
                catalog[item.product_id] = self._catalog[item.product_id]
        self._catalog = catalog

    # ------------------------------------------------------------------
    # Line items
    # ------------------------------------------------------------------

    def add_item(self, product_id: int, quantity: int) -> OrderItem:
        """Add *quantity* units of a catalog product.

        Merges into the existing line for the product, if any.  On any
        failure the order is left untouched.

        Raises:
            ValidationError: non-positive quantity, product missing from
                the snapshot, or cumulative quantity above snapshot stock.
            ItemQuantityLocked: the order already exists server-side.
        """
        self._ensure_lines_editable()
        _check_quantity(quantity)
        product = self._catalog.get(product_id)
        if product is None:
            raise ValidationError("Produto selecionado não encontrado.", field="product_id")

        existing = self._line(product_id)
        if existing is None:
            if quantity > product.stock_quantity:
                raise ValidationError(
                    f"Quantidade solicitada ({quantity}) excede o estoque "
                    f"disponível ({product.stock_quantity}) para {product.name}.",
                    field="quantity",
                )
            line = OrderItem(
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                unit_price=product.price,
            )
            self._items = [*self._items, line]
        else:
            merged = existing.quantity + quantity
            if merged > product.stock_quantity:
                raise ValidationError(
                    f"Adicionar {quantity} unidades de {product.name} excederia o "
                    f"estoque disponível ({product.stock_quantity}). Você já tem "
                    f"{existing.quantity} no pedido.",
                    field="quantity",
                )
            line = replace(existing, quantity=merged)
            self._items = [line if i.product_id == product_id else i for i in self._items]

        logger.debug(
            "order.item_added",
            product_id=product_id,
            quantity=line.quantity,
            total=str(self.compute_total()),
        )
        return line

    def remove_item(self, product_id: int) -> None:
        """Drop the line for *product_id*; no-op when there is none.

        Raises:
            ItemQuantityLocked: the order already exists server-side.
        """
        if self._line(product_id) is None:
            return
        self._ensure_lines_editable()
        self._items = [i for i in self._items if i.product_id != product_id]
        logger.debug("order.item_removed", product_id=product_id)

    def set_item_quantity(self, product_id: int, quantity: int) -> Optional[OrderItem]:
        """Replace the quantity of an existing line.

        Returns the updated line, or ``None`` when the product is not in
        the order.

        Raises:
            ItemQuantityLocked: the order already exists server-side.
            ValidationError: non-positive quantity or quantity above the
                snapshot stock.
        """
        self._ensure_lines_editable()
        _check_quantity(quantity)
        existing = self._line(product_id)
        if existing is None:
            return None
        product = self._catalog.get(product_id)
        if product is not None and quantity > product.stock_quantity:
            raise ValidationError(
                f"Quantidade solicitada ({quantity}) excede o estoque "
                f"disponível ({product.stock_quantity}) para {product.name}.",
                field="quantity",
            )
        line = replace(existing, quantity=quantity)
        self._items = [line if i.product_id == product_id else i for i in self._items]
        return line

    def compute_total(self) -> Decimal:
        """Σ(unit_price × quantity) over the current lines."""
        return sum((item.subtotal for item in self._items), ZERO)

    # ------------------------------------------------------------------
    # Header fields
    # ------------------------------------------------------------------

    def select_customer(self, customer_id: int, customer_name: str = "") -> None:
        self._customer_id = customer_id
        self._customer_name = customer_name

    def set_status(self, status: StatusLike) -> None:
        self._status = coerce_status(status)

    def set_order_date(self, order_date: date) -> None:
        self._order_date = order_date

    def override_total(self, amount: Any) -> None:
        """Set the total by hand; only allowed while editing.

        Raises:
            ValidationError: new order, or invalid/negative amount.
        """
        if not self.is_editing:
            raise ValidationError(
                "O total de um novo pedido é calculado pelos itens.",
                field="total",
            )
        try:
            value = to_decimal(amount)
        except ValueError as exc:
            raise ValidationError(str(exc), field="total") from exc
        if value < 0:
            raise ValidationError("O total não pode ser negativo.", field="total")
        self._total_override = value

    # ------------------------------------------------------------------
    # Wire payloads
    # ------------------------------------------------------------------

    def to_create_payload(self) -> Dict[str, Any]:
        """Payload for ``POST /pedidos/``.

        Raises:
            ValidationError: editing an existing order, or no customer.
        """
        if self.is_editing:
            raise ValidationError("O pedido já existe; use a atualização.", field="id")
        self._ensure_customer()
        payload: Dict[str, Any] = {
            "cliente_id": self._customer_id,
            "status": to_wire(self._status),
            "total": money_to_wire(self.compute_total()),
            "itens": [
                {
                    "produto_id": item.product_id,
                    "quantidade": item.quantity,
                    "preco_unitario": money_to_wire(item.unit_price),
                }
                for item in self._items
            ],
        }
        if self._order_date is not None:
            payload["data_pedido"] = self._order_date.isoformat()
        return payload

    def to_update_payload(self) -> Dict[str, Any]:
        """Payload for ``PUT /pedidos/<id>`` (header fields only).

        Raises:
            ValidationError: the order is new, or no customer.
        """
        if not self.is_editing:
            raise ValidationError("ID do pedido não encontrado para edição.", field="id")
        self._ensure_customer()
        return {
            "cliente_id": self._customer_id,
            "status": to_wire(self._status),
            "total": money_to_wire(self.total),
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _line(self, product_id: int) -> Optional[OrderItem]:
        for item in self._items:
            if item.product_id == product_id:
                return item
        return None

    def _ensure_lines_editable(self) -> None:
        if self.is_editing:
            raise ItemQuantityLocked(
                "Os itens de um pedido existente não podem ser alterados.",
                field="items",
            )

    def _ensure_customer(self) -> None:
        if not self._customer_id:
            raise ValidationError(
                "Cliente é obrigatório. Selecione um cliente no formulário.",
                field="customer_id",
            )


def _check_quantity(quantity: Any) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(
            "Selecione um produto e especifique uma quantidade válida.",
            field="quantity",
        )
