"""``/clientes/`` implementation of the Customer repository."""

from __future__ import annotations

from typing import List, Optional

from modules.core.repositories.http_repository import HttpRepository
from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository


class CustomerHttpRepository(HttpRepository[Customer], ICustomerRepository):
    resource = "clientes"
    entity_label = "cliente"
    entity = Customer

    def search(self, query: str, limit: Optional[int] = None) -> List[Customer]:
        return self.list({"search": query.strip(), "limit": limit})
