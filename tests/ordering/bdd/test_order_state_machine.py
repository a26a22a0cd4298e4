"""BDD tests for the order state machine."""

from protean import current_domain
from protean.exceptions import InvalidStateError
from pytest_bdd import scenarios, when

from storefront.ordering.order.cancellation import CancelOrder

scenarios("features/order_state_machine.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the customer cancels the order")
def _(customer_id, order_id, outcome):
    try:
        outcome["result"] = current_domain.process(
            CancelOrder(customer_id=customer_id, order_id=order_id),
            asynchronous=False,
        )
        outcome["error"] = None
    except InvalidStateError as exc:
        outcome["error"] = exc
