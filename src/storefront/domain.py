"""Storefront domain composition root.

A single domain hosts identity, catalogue, cart, order, payment and review
elements so that order placement can read the cart and the live catalogue and
write stock, the order and the emptied cart in one unit of work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
