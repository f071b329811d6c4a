from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from modules.core.session import SessionContext, TokenStore, UserInfo
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem
from modules.products.models import Product
from modules.sales.models import Sale


@pytest.fixture()
def cola():
    return Product(id=1, name="Cola", price=Decimal("2.99"), stock_quantity=5)


@pytest.fixture()
def water():
    return Product(id=2, name="Água", price=Decimal("1.49"), stock_quantity=10)


@pytest.fixture()
def catalog(cola, water):
    return [cola, water]


@pytest.fixture()
def make_order():
    """Factory for orders as the store returns them."""

    def _make(**overrides):
        defaults = {
            "id": 7,
            "customer_id": 3,
            "customer_name": "Maria Silva",
            "items": [
                OrderItem(
                    product_id=1,
                    product_name="Cola",
                    quantity=2,
                    unit_price=Decimal("2.99"),
                    id=70,
                )
            ],
            "total_amount": Decimal("5.98"),
            "status": OrderStatus.SHIPPED,
        }
        defaults.update(overrides)
        return Order(**defaults)

    return _make


@pytest.fixture()
def make_sale():
    def _make(**overrides):
        defaults = {
            "id": 42,
            "order_id": 7,
            "amount": Decimal("5.98"),
            "payment_method": "PIX",
            "staff_id": 9,
        }
        defaults.update(overrides)
        return Sale(**defaults)

    return _make


@pytest.fixture()
def token_store(tmp_path):
    return TokenStore(tmp_path / "token")


@pytest.fixture()
def session(token_store):
    """Session already holding a token and the identity of staff member 9."""
    ctx = SessionContext(token_store)
    ctx._token = "tok-123"
    ctx._user = UserInfo(id=9, email="ana@talkstoque.com")
    return ctx


@pytest.fixture()
def mock_order_repo():
    return MagicMock()


@pytest.fixture()
def mock_sale_repo():
    return MagicMock()


@pytest.fixture()
def mock_event_bus():
    return MagicMock()
