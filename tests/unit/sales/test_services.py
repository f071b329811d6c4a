"""Unit tests for SaleRecorder.

Covers:
- create_sale: validation before any call, exactly one delivery update
  after a successful creation, none after a failed one, PartialSuccess.
- update_sale: the order link cannot change.
- delete_sale: reconciliation prompt opened with the right suggestion.
- describe_sale: placeholders when the order cannot be fetched.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from modules.core.exceptions import PartialSuccess, RemoteError, ValidationError
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import OrderNotFound
from modules.reconciliation.prompt import AwaitingChoice, Idle, ReconciliationPrompt
from modules.sales.events import SaleCreated, SaleDeleted
from modules.sales.exceptions import SaleNotFound
from modules.sales.services import SaleRecorder
from modules.staff.models import StaffMember

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def status_machine():
    return MagicMock()


@pytest.fixture()
def prompt(status_machine):
    return ReconciliationPrompt(status_machine)


@pytest.fixture()
def staff_repo():
    return MagicMock()


@pytest.fixture()
def recorder(mock_sale_repo, mock_order_repo, status_machine, session, prompt, mock_event_bus, staff_repo):
    return SaleRecorder(
        sale_repository=mock_sale_repo,
        order_repository=mock_order_repo,
        status_machine=status_machine,
        session=session,
        prompt=prompt,
        event_bus=mock_event_bus,
        staff_repository=staff_repo,
    )


@pytest.fixture()
def shipped_order(mock_order_repo, make_order):
    order = make_order(status=OrderStatus.SHIPPED)
    mock_order_repo.get_by_id.return_value = order
    return order


# ===========================================================================
# create_sale
# ===========================================================================


class TestCreateSale:
    def test_success_marks_order_delivered_once(
        self, recorder, mock_sale_repo, status_machine, shipped_order, make_sale
    ):
        mock_sale_repo.create.return_value = make_sale()

        sale = recorder.create_sale(7, "5.98", "PIX")

        assert sale.id == 42
        status_machine.set_status.assert_called_once_with(
            7, OrderStatus.DELIVERED, previous_status=OrderStatus.SHIPPED
        )

    def test_payload_uses_session_staff_id(self, recorder, mock_sale_repo, shipped_order, make_sale):
        mock_sale_repo.create.return_value = make_sale()

        recorder.create_sale(7, Decimal("5.98"), "Cartão de Crédito")

        dto = mock_sale_repo.create.call_args.args[0]
        assert dto.to_api() == {
            "pedido_id": 7,
            "funcionario_id": 9,
            "valor_total": "5.98",
            "forma_pagamento": "Cartão de Crédito",
        }

    def test_explicit_staff_id_wins(self, recorder, mock_sale_repo, shipped_order, make_sale):
        mock_sale_repo.create.return_value = make_sale()

        recorder.create_sale(7, "5.98", "PIX", staff_id=4)

        assert mock_sale_repo.create.call_args.args[0].staff_id == 4

    def test_publishes_sale_created(self, recorder, mock_sale_repo, mock_event_bus, shipped_order, make_sale):
        mock_sale_repo.create.return_value = make_sale()

        recorder.create_sale(7, "5.98", "PIX")

        events = mock_event_bus.publish_all.call_args.args[0]
        assert [type(e) for e in events] == [SaleCreated]
        assert events[0].data == {"order_id": 7}

    def test_creation_failure_issues_no_status_update(
        self, recorder, mock_sale_repo, status_machine, shipped_order
    ):
        mock_sale_repo.create.side_effect = RemoteError("create_venda", ["Pedido inválido"])

        with pytest.raises(RemoteError, match="Pedido inválido"):
            recorder.create_sale(7, "5.98", "PIX")

        status_machine.set_status.assert_not_called()

    def test_status_failure_is_partial_success(
        self, recorder, mock_sale_repo, status_machine, shipped_order, make_sale
    ):
        sale = make_sale()
        mock_sale_repo.create.return_value = sale
        error = RemoteError("update_order_status", ["Pedido bloqueado"])
        status_machine.set_status.side_effect = error

        with pytest.raises(PartialSuccess) as exc_info:
            recorder.create_sale(7, "5.98", "PIX")

        assert exc_info.value.result is sale
        assert exc_info.value.error is error
        assert exc_info.value.operation == "create_sale"
        status_machine.set_status.assert_called_once()

    @pytest.mark.parametrize(
        "order_id, amount, method",
        [
            (0, "5.98", "PIX"),
            (None, "5.98", "PIX"),
            (7, "-1", "PIX"),
            (7, "abc", "PIX"),
            (7, "5.98", "Bitcoin"),
        ],
    )
    def test_invalid_input_makes_no_call(
        self, recorder, mock_sale_repo, mock_order_repo, status_machine, order_id, amount, method
    ):
        with pytest.raises(ValidationError):
            recorder.create_sale(order_id, amount, method)

        mock_order_repo.get_by_id.assert_not_called()
        mock_sale_repo.create.assert_not_called()
        status_machine.set_status.assert_not_called()

    def test_order_must_be_shipped(self, recorder, mock_order_repo, mock_sale_repo, make_order):
        mock_order_repo.get_by_id.return_value = make_order(status=OrderStatus.PENDING)

        with pytest.raises(ValidationError, match="Enviado"):
            recorder.create_sale(7, "5.98", "PIX")

        mock_sale_repo.create.assert_not_called()

    def test_missing_order(self, recorder, mock_order_repo, mock_sale_repo):
        mock_order_repo.get_by_id.return_value = None

        with pytest.raises(OrderNotFound):
            recorder.create_sale(7, "5.98", "PIX")
        mock_sale_repo.create.assert_not_called()

    def test_shipped_check_can_be_disabled(
        self, mock_sale_repo, mock_order_repo, status_machine, session, prompt, make_sale
    ):
        recorder = SaleRecorder(
            mock_sale_repo,
            mock_order_repo,
            status_machine,
            session,
            prompt,
            require_shipped=False,
        )
        mock_sale_repo.create.return_value = make_sale()

        recorder.create_sale(7, "5.98", "PIX")

        mock_order_repo.get_by_id.assert_not_called()
        status_machine.set_status.assert_called_once()

    def test_amount_defaults_to_order_total(self, recorder, mock_sale_repo, mock_order_repo, make_order, make_sale):
        mock_order_repo.get_by_id.return_value = make_order(total_amount=Decimal("10.45"))
        mock_sale_repo.create.return_value = make_sale()

        recorder.create_sale(7, payment_method="PIX")

        dto = mock_sale_repo.create.call_args.args[0]
        assert dto.amount == Decimal("10.45")
        assert dto.to_api()["valor_total"] == "10.45"
        mock_order_repo.get_by_id.assert_called_once_with(7)

    def test_explicit_amount_overrides_order_total(self, recorder, mock_sale_repo, mock_order_repo, make_order, make_sale):
        mock_order_repo.get_by_id.return_value = make_order(total_amount=Decimal("10.45"))
        mock_sale_repo.create.return_value = make_sale()

        recorder.create_sale(7, "9.00", "PIX")

        assert mock_sale_repo.create.call_args.args[0].amount == Decimal("9.00")

    def test_amount_default_fetches_order_when_check_disabled(
        self, mock_sale_repo, mock_order_repo, status_machine, session, prompt, make_order, make_sale
    ):
        recorder = SaleRecorder(
            mock_sale_repo,
            mock_order_repo,
            status_machine,
            session,
            prompt,
            require_shipped=False,
        )
        mock_order_repo.get_by_id.return_value = make_order(
            status=OrderStatus.PENDING, total_amount=Decimal("3.50")
        )
        mock_sale_repo.create.return_value = make_sale()

        recorder.create_sale(7, payment_method="Dinheiro")

        assert mock_sale_repo.create.call_args.args[0].amount == Decimal("3.50")

    def test_amount_default_for_missing_order(self, mock_sale_repo, mock_order_repo, status_machine, session, prompt):
        recorder = SaleRecorder(
            mock_sale_repo,
            mock_order_repo,
            status_machine,
            session,
            prompt,
            require_shipped=False,
        )
        mock_order_repo.get_by_id.return_value = None

        with pytest.raises(OrderNotFound):
            recorder.create_sale(7, payment_method="PIX")
        mock_sale_repo.create.assert_not_called()


# ===========================================================================
# update_sale
# ===========================================================================


class TestUpdateSale:
    def test_updates_amount_and_method(self, recorder, mock_sale_repo, make_sale):
        mock_sale_repo.get_by_id.return_value = make_sale()
        mock_sale_repo.update.return_value = make_sale(amount=Decimal("6.50"))

        sale = recorder.update_sale(42, {"amount": "6.5", "payment_method": "Dinheiro"})

        assert sale.amount == Decimal("6.50")
        dto = mock_sale_repo.update.call_args.args[1]
        assert dto.to_api() == {"valor_total": "6.50", "forma_pagamento": "Dinheiro"}

    def test_order_cannot_change(self, recorder, mock_sale_repo):
        with pytest.raises(ValidationError) as exc_info:
            recorder.update_sale(42, {"order_id": 8})

        assert exc_info.value.field == "order_id"
        mock_sale_repo.update.assert_not_called()

    def test_unknown_field_rejected(self, recorder, mock_sale_repo):
        with pytest.raises(ValidationError):
            recorder.update_sale(42, {"pedido_id": 8})
        mock_sale_repo.update.assert_not_called()

    def test_not_found(self, recorder, mock_sale_repo):
        mock_sale_repo.get_by_id.return_value = None

        with pytest.raises(SaleNotFound):
            recorder.update_sale(42, {"amount": "1"})
        mock_sale_repo.update.assert_not_called()


# ===========================================================================
# delete_sale
# ===========================================================================


class TestDeleteSale:
    def test_delivered_order_suggests_shipped(
        self, recorder, mock_sale_repo, mock_order_repo, prompt, make_sale, make_order
    ):
        mock_sale_repo.get_by_id.return_value = make_sale()
        mock_order_repo.get_by_id.return_value = make_order(status=OrderStatus.DELIVERED)

        state = recorder.delete_sale(42)

        mock_sale_repo.delete.assert_called_once_with(42)
        assert prompt.state == state
        assert state == AwaitingChoice(
            order_id=7,
            current_status=OrderStatus.DELIVERED,
            suggested_status=OrderStatus.SHIPPED,
            customer_name="Maria Silva",
        )

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED],
    )
    def test_other_status_suggested_unchanged(
        self, recorder, mock_sale_repo, mock_order_repo, make_sale, make_order, status
    ):
        mock_sale_repo.get_by_id.return_value = make_sale()
        mock_order_repo.get_by_id.return_value = make_order(status=status)

        state = recorder.delete_sale(42)

        assert state.current_status is status
        assert state.suggested_status is status

    def test_unreadable_order_assumes_delivered(
        self, recorder, mock_sale_repo, mock_order_repo, make_sale
    ):
        mock_sale_repo.get_by_id.return_value = make_sale()
        mock_order_repo.get_by_id.side_effect = RemoteError("get_pedido")

        state = recorder.delete_sale(42)

        mock_sale_repo.delete.assert_called_once_with(42)
        assert state.current_status is OrderStatus.DELIVERED
        assert state.suggested_status is OrderStatus.SHIPPED

    def test_never_changes_order_status(
        self, recorder, mock_sale_repo, mock_order_repo, status_machine, make_sale, make_order
    ):
        mock_sale_repo.get_by_id.return_value = make_sale()
        mock_order_repo.get_by_id.return_value = make_order(status=OrderStatus.DELIVERED)

        recorder.delete_sale(42)

        status_machine.set_status.assert_not_called()
        mock_order_repo.update_status.assert_not_called()

    def test_publishes_sale_deleted(self, recorder, mock_sale_repo, mock_order_repo, mock_event_bus, make_sale, make_order):
        mock_sale_repo.get_by_id.return_value = make_sale()
        mock_order_repo.get_by_id.return_value = make_order()

        recorder.delete_sale(42)

        event = mock_event_bus.publish.call_args.args[0]
        assert isinstance(event, SaleDeleted)
        assert event.data == {"order_id": 7}

    def test_delete_failure_keeps_prompt_idle(
        self, recorder, mock_sale_repo, mock_order_repo, prompt, make_sale, make_order
    ):
        mock_sale_repo.get_by_id.return_value = make_sale()
        mock_order_repo.get_by_id.return_value = make_order(status=OrderStatus.DELIVERED)
        mock_sale_repo.delete.side_effect = RemoteError("delete_venda")

        with pytest.raises(RemoteError):
            recorder.delete_sale(42)

        assert isinstance(prompt.state, Idle)

    def test_not_found(self, recorder, mock_sale_repo):
        mock_sale_repo.get_by_id.return_value = None

        with pytest.raises(SaleNotFound):
            recorder.delete_sale(42)
        mock_sale_repo.delete.assert_not_called()

    def test_skip_keeps_order_delivered(
        self, recorder, mock_sale_repo, mock_order_repo, status_machine, prompt, make_sale, make_order
    ):
        mock_sale_repo.get_by_id.return_value = make_sale()
        mock_order_repo.get_by_id.return_value = make_order(status=OrderStatus.DELIVERED)

        state = recorder.delete_sale(42)
        assert state.suggested_status.label == "Enviado"

        prompt.skip()

        assert isinstance(prompt.state, Idle)
        status_machine.set_status.assert_not_called()
        mock_order_repo.update_status.assert_not_called()


# ===========================================================================
# Queries
# ===========================================================================


class TestDescribeSale:
    def test_joins_order_and_staff(self, recorder, mock_order_repo, staff_repo, make_sale, make_order):
        mock_order_repo.get_by_id.return_value = make_order(status=OrderStatus.DELIVERED)
        staff_repo.get_by_id.return_value = StaffMember(id=9, name="Ana", email="ana@talkstoque.com")

        details = recorder.describe_sale(make_sale())

        assert details.customer_name == "Maria Silva"
        assert details.items_summary == "Cola (x2)"
        assert details.order_status == "Entregue"
        assert details.staff_name == "Ana"
        assert details.sale.invoice_number == "INV-00042"

    def test_placeholders_when_order_unavailable(self, recorder, mock_order_repo, staff_repo, make_sale):
        mock_order_repo.get_by_id.side_effect = RemoteError("get_pedido")
        staff_repo.get_by_id.side_effect = RemoteError("get_funcionario")

        details = recorder.describe_sale(make_sale())

        assert details.customer_name == "Pedido ID: 7"
        assert details.items_summary == "Erro ao carregar itens do pedido"
        assert details.order_status is None
        assert details.staff_name is None

    def test_get_sale_not_found(self, recorder, mock_sale_repo):
        mock_sale_repo.get_by_id.return_value = None

        with pytest.raises(SaleNotFound):
            recorder.get_sale(1)

    def test_list_sales(self, recorder, mock_sale_repo, make_sale):
        mock_sale_repo.list.return_value = [make_sale()]

        assert [s.id for s in recorder.list_sales()] == [42]
