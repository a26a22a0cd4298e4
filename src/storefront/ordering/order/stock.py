"""Stock ledger: withdraws order quantities from products, all or nothing.

Each product is decremented through ``Product.withdraw_stock``, which only
applies when the stock on hand still covers the request. Callers hold the
product write lock, so that stock is the latest committed value. If any withdrawal
fails, the withdrawals already applied are put back before the failure is
re-raised, so a failed placement leaves every product's stock as it found it.
"""

from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product, StockChangeReason
from storefront.shared.errors import InsufficientStockError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def requested_quantities(lines) -> dict[str, int]:
    """Total quantity per product, in first-seen order."""
    totals = {}
    for line in lines:
        product_id = str(line["product_id"])
        totals[product_id] = totals.get(product_id, 0) + line["quantity"]
    return totals


class StockLedger:
    def __init__(self, products: dict[str, Product] | None = None):
        self._products = products or {}
        self._applied: list[tuple[Product, int]] = []

    def _product(self, product_id) -> Product:
        product = self._products.get(product_id)
        if product is None:
            product = current_domain.repository_for(Product).get(product_id)
            self._products[product_id] = product
        return product

    def withdraw(self, lines):
        """Withdraw every line's quantity or none of them.

        Raises:
            InsufficientStockError: A product no longer has enough stock.
        """
        repo = current_domain.repository_for(Product)
        try:
            for product_id, quantity in requested_quantities(lines).items():
                product = self._product(product_id)
                product.withdraw_stock(quantity)
                repo.add(product)
                self._applied.append((product, quantity))
        except InsufficientStockError as exc:
            logger.warning(
                "Stock withdrawal failed, compensating",
                product_id=exc.product_id,
                requested=exc.requested,
                available=exc.available,
                applied=len(self._applied),
            )
            self.compensate()
            raise

        logger.info("Stock withdrawn", products=len(self._applied))
        return list(self._applied)

    def compensate(self):
        """Put back every withdrawal applied so far, most recent first."""
        repo = current_domain.repository_for(Product)
        while self._applied:
            product, quantity = self._applied.pop()
            product.restock(quantity, reason=StockChangeReason.COMPENSATION)
            repo.add(product)
