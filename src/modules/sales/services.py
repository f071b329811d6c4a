"""Sale service layer (Use Cases).

Records sales against shipped orders and keeps the order status coupled
to the sale:

- creating a sale is followed by exactly one attempt to move the order
  to ``DELIVERED``; a failure there is reported as ``PartialSuccess``
  because the sale itself already exists;
- deleting a sale never touches the order; it opens the
  ``ReconciliationPrompt`` so the operator decides what the order
  status becomes.

The order a sale belongs to is fixed at creation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog

from modules.core.dtos import build_dto
from modules.core.exceptions import PartialSuccess, RemoteError, ValidationError
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import OrderNotFound
from modules.sales.dtos import CreateSaleDTO, UpdateSaleDTO
from modules.sales.events import SaleCreated, SaleDeleted, SaleUpdated
from modules.sales.exceptions import SaleNotFound
from modules.sales.models import SaleDetails

if TYPE_CHECKING:
    from modules.core.repositories.interfaces import IRepository
    from modules.core.session import SessionContext
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.orders.state_machine import OrderStatusMachine
    from modules.reconciliation.prompt import AwaitingChoice, ReconciliationPrompt
    from modules.sales.models import Sale
    from modules.sales.repositories.interfaces import ISaleRepository
    from modules.staff.models import StaffMember
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)

UNKNOWN_CUSTOMER = "Cliente Desconhecido"
ITEMS_UNAVAILABLE = "Erro ao carregar itens do pedido"


class SaleRecorder:
    """Application service for Sale use-cases.

    Receives repositories, the status machine, the reconciliation prompt
    and the session via constructor injection (DIP).
    """

    def __init__(
        self,
        sale_repository: ISaleRepository,
        order_repository: IOrderRepository,
        status_machine: OrderStatusMachine,
        session: SessionContext,
        prompt: ReconciliationPrompt,
        event_bus: Optional[IEventBus] = None,
        staff_repository: Optional[IRepository[StaffMember]] = None,
        require_shipped: bool = True,
    ) -> None:
        self._sale_repo = sale_repository
        self._order_repo = order_repository
        self._status_machine = status_machine
        self._session = session
        self._prompt = prompt
        self._event_bus = event_bus
        self._staff_repo = staff_repository
        self._require_shipped = require_shipped

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_sale(
        self,
        order_id: Any,
        amount: Any = None,
        payment_method: Any = None,
        staff_id: Optional[int] = None,
    ) -> Sale:
        """Register a sale and mark its order delivered.

        Without an *amount* the sale takes the order total.

        Raises:
            ValidationError: no order selected, negative amount, unknown
                payment method, or the order is not shipped.
            OrderNotFound: the order does not exist.
            RemoteError: the sale was not created; no status update was
                attempted.
            PartialSuccess: the sale was created but the order status
                update failed; ``result`` holds the sale.
        """
        dto = build_dto(
            CreateSaleDTO,
            {
                "order_id": order_id,
                "amount": amount,
                "payment_method": payment_method,
                "staff_id": staff_id if staff_id is not None else self._session.staff_id,
            },
        )
        order: Optional[Order] = None
        if self._require_shipped:
            order = self._ensure_shipped(dto.order_id)
        if dto.amount is None:
            order = order or self._load_order(dto.order_id)
            dto = dto.model_copy(update={"amount": order.total_amount})
        log = logger.bind(order_id=dto.order_id, amount=str(dto.amount))

        log.info("sale.creation_started")
        try:
            sale = self._sale_repo.create(dto)
        except RemoteError:
            log.warning("sale.creation_failed")
            raise

        try:
            self._status_machine.set_status(
                dto.order_id,
                OrderStatus.DELIVERED,
                previous_status=OrderStatus.SHIPPED,
            )
        except RemoteError as exc:
            log.error("sale.order_delivery_failed", sale_id=sale.id)
            raise PartialSuccess("create_sale", sale, exc) from exc
        finally:
            sale.add_domain_event(
                SaleCreated(aggregate_id=sale.id, data={"order_id": dto.order_id})
            )
            self._publish(sale)

        log.info("sale.created", sale_id=sale.id)
        return sale

    def update_sale(self, sale_id: int, patch: Dict[str, Any]) -> Sale:
        """Change amount, payment method or staff member of a sale.

        Raises:
            ValidationError: the patch tries to move the sale to another
                order, or carries invalid values.
            SaleNotFound: the sale does not exist.
            RemoteError: the store rejected the update.
        """
        if "order_id" in patch:
            raise ValidationError(
                "O pedido de uma venda não pode ser alterado.", field="order_id"
            )
        dto = build_dto(UpdateSaleDTO, patch)
        self.get_sale(sale_id)
        sale = self._sale_repo.update(sale_id, dto)
        sale.add_domain_event(
            SaleUpdated(aggregate_id=sale_id, data={"fields": sorted(dto.to_api())})
        )
        self._publish(sale)
        logger.info("sale.updated", sale_id=sale_id)
        return sale

    def delete_sale(self, sale_id: int) -> AwaitingChoice:
        """Delete a sale and open the reconciliation prompt for its order.

        The order status is read before the deletion; when it cannot be
        read the prompt assumes the order is delivered.

        Raises:
            SaleNotFound: the sale does not exist.
            RemoteError: the deletion failed; the prompt stays idle.
        """
        sale = self.get_sale(sale_id)
        log = logger.bind(sale_id=sale_id, order_id=sale.order_id)

        current_status: Optional[OrderStatus] = None
        customer_name: Optional[str] = None
        try:
            order = self._order_repo.get_by_id(sale.order_id)
        except RemoteError as exc:
            log.warning("sale.order_status_unavailable", error=exc.message)
            order = None
        if order is not None:
            current_status = order.status
            customer_name = order.customer_name

        self._sale_repo.delete(sale_id)
        log.info("sale.deleted")
        if self._event_bus is not None:
            self._event_bus.publish(
                SaleDeleted(aggregate_id=sale_id, data={"order_id": sale.order_id})
            )
        return self._prompt.begin(sale.order_id, current_status, customer_name=customer_name)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_sale(self, sale_id: int) -> Sale:
        """Retrieve a single sale by ID.

        Raises:
            SaleNotFound: if the sale does not exist.
        """
        sale = self._sale_repo.get_by_id(sale_id)
        if not sale:
            raise SaleNotFound(sale_id)
        return sale

    def list_sales(self) -> List[Sale]:
        return self._sale_repo.list()

    def describe_sale(self, sale: Sale) -> SaleDetails:
        """Join *sale* with its order (and staff member, when known).

        Fetch failures degrade to placeholder text instead of raising.
        """
        customer_name = f"Pedido ID: {sale.order_id}"
        items_summary = ITEMS_UNAVAILABLE
        order_status: Optional[str] = None
        try:
            order = self._order_repo.get_by_id(sale.order_id)
        except RemoteError as exc:
            logger.warning(
                "sale.order_details_unavailable",
                sale_id=sale.id,
                order_id=sale.order_id,
                error=exc.message,
            )
            order = None
        if order is not None:
            customer_name = order.customer_name or UNKNOWN_CUSTOMER
            items_summary = order.items_summary()
            order_status = order.status.label

        return SaleDetails(
            sale=sale,
            customer_name=customer_name,
            items_summary=items_summary,
            order_status=order_status,
            staff_name=self._staff_name(sale.staff_id),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_order(self, order_id: int) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def _ensure_shipped(self, order_id: int) -> Order:
        order = self._load_order(order_id)
        if order.status is not OrderStatus.SHIPPED:
            raise ValidationError(
                f"Apenas pedidos com status '{OrderStatus.SHIPPED.label}' podem "
                f"gerar uma venda (pedido {order_id}: '{order.status.label}').",
                field="order_id",
            )
        return order

    def _staff_name(self, staff_id: Optional[int]) -> Optional[str]:
        if staff_id is None or self._staff_repo is None:
            return None
        try:
            member = self._staff_repo.get_by_id(staff_id)
        except RemoteError:
            logger.warning("sale.staff_unavailable", staff_id=staff_id)
            return None
        return member.name if member else None

    def _publish(self, sale: Sale) -> None:
        events = sale.pull_domain_events()
        if self._event_bus is not None:
            self._event_bus.publish_all(events)
