"""Product domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import RemoteError


class ProductNotFound(RemoteError):
    """The requested product does not exist in the remote store."""

    def __init__(self, product_id: int) -> None:
        super().__init__(
            "get_product",
            status_code=404,
            fallback=f"Produto {product_id} não encontrado.",
        )
        self.product_id = product_id
