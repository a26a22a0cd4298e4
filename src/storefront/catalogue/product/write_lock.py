"""Process-wide serialization of commands that write a Product.

A unit of work reads products into its own session and writes them back on
commit, so two handlers running side by side can both pass a stock check
against the same snapshot. Handlers decorated with ``serialize_product_writes``
hold one shared lock for their whole unit of work, commit included: each sees
every stock change committed before it started.

Apply it above ``@handle`` so the lock wraps the unit of work that ``handle``
opens. ``functools.wraps`` carries ``handle``'s registration marker across.

Across processes the lock does not apply; there a concurrent write is caught by
the repository's aggregate version check, which raises ``ExpectedVersionError``
(answered as HTTP 409).
"""

import functools
import threading

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_product_writes = threading.RLock()


def serialize_product_writes(handler_method):
    @functools.wraps(handler_method)
    def wrapper(*args, **kwargs):
        if not _product_writes.acquire(blocking=False):
            logger.debug("Waiting for product write lock", handler=handler_method.__qualname__)
            _product_writes.acquire()
        try:
            return handler_method(*args, **kwargs)
        finally:
            _product_writes.release()

    return wrapper
