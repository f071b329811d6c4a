"""Product service layer (Use Cases).

Orchestrates inventory maintenance, delegating every read and write to
the injected ``IProductRepository``.

Rules enforced here:
- Name is required, price and stock cannot be negative (validated by DTO).
- Invalid input never reaches the remote store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

import structlog

from modules.core.dtos import build_dto
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, **fields: Any) -> Product:
        """Create a new product.

        Raises:
            ValidationError: missing name or negative price/stock.
            RemoteError: the store rejected the product.
        """
        dto = build_dto(CreateProductDTO, fields)
        product = self._repo.create(dto)
        logger.info("product.created", product_id=product.id)
        return product

    def update_product(self, id: int, **fields: Any) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ValidationError: negative price/stock.
            ProductNotFound: the product does not exist.
        """
        dto = build_dto(UpdateProductDTO, fields)
        self.get_product(id)
        product = self._repo.update(id, dto)
        logger.info("product.updated", product_id=id)
        return product

    def delete_product(self, id: int) -> None:
        """Delete a product.

        Raises:
            ProductNotFound: the product does not exist.
        """
        self.get_product(id)
        self._repo.delete(id)
        logger.info("product.deleted", product_id=id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, search: str = "", limit: Optional[int] = None) -> List[Product]:
        """Return the catalog, optionally filtered by a free-text search."""
        return self._repo.search(search, limit=limit)

    def get_product(self, id: int) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(id)
        return product

