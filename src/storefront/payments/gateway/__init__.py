"""Payment gateway selection.

``get_gateway()`` returns the active adapter, a ``FakeGateway`` unless tests
install another with ``set_gateway()``.
"""

from storefront.payments.gateway.fake_adapter import FakeGateway
from storefront.payments.gateway.port import ChargeResult, PaymentGateway

__all__ = ["ChargeResult", "FakeGateway", "PaymentGateway", "get_gateway", "reset_gateway", "set_gateway"]

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None
