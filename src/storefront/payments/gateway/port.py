"""Payment gateway port.

The storefront never talks to a real processor; an adapter behind this
interface settles the charge and hands back an opaque payment reference.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChargeResult:
    """Outcome of a charge attempt."""

    success: bool
    payment_id: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    @abstractmethod
    def charge(self, order_id: str, amount: float, payment_method: str) -> ChargeResult:
        """Settle ``amount`` for ``order_id`` using ``payment_method``."""
        ...
