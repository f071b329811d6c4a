"""Order status reconciliation after a sale is deleted.

Recording a sale moves its order to ``DELIVERED``.  When that sale is
deleted the delivery is no longer evidenced, so the operator is asked
which status the order should have now:

    Idle ──begin()──▶ AwaitingChoice ──confirm(status)──▶ Idle
                                     └──skip()──────────▶ Idle

``confirm`` issues exactly one status update; ``skip`` issues none.  An
occurrence ends with either exit and is only reopened by another sale
deletion.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

import structlog

from modules.core.exceptions import RemoteError, ValidationError
from modules.orders.constants import OrderStatus
from modules.orders.state_machine import StatusLike, coerce_status, suggested_rollback

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.state_machine import OrderStatusMachine

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Idle:
    """No reconciliation pending."""


@dataclass(frozen=True)
class AwaitingChoice:
    """A sale was deleted; the operator has to pick the order's status."""

    order_id: int
    current_status: OrderStatus
    suggested_status: OrderStatus
    customer_name: Optional[str] = None


PromptState = Union[Idle, AwaitingChoice]

IDLE = Idle()


class ReconciliationPrompt:
    """Two-state prompt driven by ``SaleRecorder.delete_sale``."""

    def __init__(self, status_machine: OrderStatusMachine) -> None:
        self._status_machine = status_machine
        self._state: PromptState = IDLE

    @property
    def state(self) -> PromptState:
        return self._state

    @property
    def is_awaiting_choice(self) -> bool:
        return isinstance(self._state, AwaitingChoice)

    def begin(
        self,
        order_id: int,
        current_status: Optional[OrderStatus],
        customer_name: Optional[str] = None,
    ) -> AwaitingChoice:
        """Open the prompt for *order_id*.

        An unknown current status is taken to be ``DELIVERED``: the sale
        that was just deleted had moved the order there.
        """
        current = current_status or OrderStatus.DELIVERED
        state = AwaitingChoice(
            order_id=order_id,
            current_status=current,
            suggested_status=suggested_rollback(current),
            customer_name=customer_name,
        )
        if self.is_awaiting_choice:
            logger.warning(
                "reconciliation.replaced",
                previous_order_id=self._state.order_id,
                order_id=order_id,
            )
        self._state = state
        logger.info(
            "reconciliation.awaiting_choice",
            order_id=order_id,
            current_status=current.label,
            suggested_status=state.suggested_status.label,
        )
        return state

    def confirm(self, chosen_status: Optional[StatusLike] = None) -> Optional[Order]:
        """Apply *chosen_status* (default: the suggestion) and close the prompt.

        The prompt is back to ``Idle`` whether or not the update succeeds.

        Raises:
            ValidationError: nothing to confirm, or unknown status (the
                prompt stays open in that case).
            RemoteError: the status update failed.
        """
        state = self._require_awaiting("confirm")
        status = (
            state.suggested_status if chosen_status is None else coerce_status(chosen_status)
        )
        log = logger.bind(order_id=state.order_id, chosen_status=status.label)

        self._state = IDLE
        try:
            order = self._status_machine.set_status(
                state.order_id, status, previous_status=state.current_status
            )
        except RemoteError:
            log.warning("reconciliation.confirm_failed")
            raise
        log.info("reconciliation.confirmed")
        return order

    def skip(self) -> None:
        """Close the prompt without touching the order.

        Raises:
            ValidationError: nothing to skip.
        """
        state = self._require_awaiting("skip")
        self._state = IDLE
        logger.info(
            "reconciliation.skipped",
            order_id=state.order_id,
            kept_status=state.current_status.label,
        )

    def _require_awaiting(self, action: str) -> AwaitingChoice:
        if not isinstance(self._state, AwaitingChoice):
            raise ValidationError(
                "Nenhum pedido ou novo status selecionado para atualização.",
                field=action,
            )
        return self._state
