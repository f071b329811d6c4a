"""Unit tests for Sales event handlers."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from modules.sales.apps import register_handlers
from modules.sales.events import SaleCreated, SaleDeleted, SaleUpdated
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


@pytest.fixture()
def bus():
    bus = InMemoryEventBus()
    register_handlers(bus)
    return bus


def test_sale_created_logs_order(bus):
    with capture_logs() as logs:
        bus.publish(SaleCreated(aggregate_id=42, data={"order_id": 7}))

    assert logs[0]["event"] == "Venda 42 registrada"
    assert logs[0]["order_id"] == 7


def test_sale_updated_logs(bus):
    with capture_logs() as logs:
        bus.publish(SaleUpdated(aggregate_id=42))

    assert logs[0]["sale_id"] == 42


def test_sale_deleted_logs(bus):
    with capture_logs() as logs:
        bus.publish(SaleDeleted(aggregate_id=42, data={"order_id": 7}))

    assert logs[0]["event"] == "Venda 42 excluída"
