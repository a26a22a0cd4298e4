"""Simulated gateway: every charge settles immediately unless configured to decline.

Charges are kept in ``calls`` only when the gateway is built with
``record_calls=True``; the process-wide default gateway records nothing.
"""

from uuid import uuid4

from storefront.payments.gateway.port import ChargeResult, PaymentGateway

PAYMENT_ID_PREFIX = "PAY_"


def new_payment_id() -> str:
    return f"{PAYMENT_ID_PREFIX}{uuid4().hex[:8].upper()}"


class FakeGateway(PaymentGateway):
    def __init__(self, record_calls: bool = False) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment declined"
        self.record_calls = record_calls
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Payment declined") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def charge(self, order_id: str, amount: float, payment_method: str) -> ChargeResult:
        if self.record_calls:
            self.calls.append({"order_id": order_id, "amount": amount, "payment_method": payment_method})

        if self.should_succeed:
            return ChargeResult(success=True, payment_id=new_payment_id())
        return ChargeResult(success=False, failure_reason=self.failure_reason)
