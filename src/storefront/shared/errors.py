"""Storefront-specific exceptions layered on Protean's exception hierarchy.

Protean's classes carry the error taxonomy used throughout the domain:
``ValidationError`` for bad input, ``ObjectNotFoundError`` for missing or
foreign records, ``InvalidStateError`` for conflicts with current state.
Only ``ValidationError`` keeps its payload on ``messages``; the others hold it
as their first argument, which ``error_messages`` reads for either kind.
"""

from protean.exceptions import InvalidStateError, ProteanExceptionWithMessage


def error_messages(exc) -> dict:
    """The ``{field: [message, ...]}`` payload of a Protean exception."""
    messages = getattr(exc, "messages", None)
    if messages is None and exc.args:
        messages = exc.args[0]
    if not isinstance(messages, dict):
        return {"_entity": [str(messages)]}
    return {key: value if isinstance(value, list) else [value] for key, value in messages.items()}


class InsufficientStockError(InvalidStateError):
    """Requested quantity exceeds a product's available stock."""

    def __init__(self, product_id, product_name=None, requested=0, available=0):
        label = product_name or product_id
        self.messages = {"stock": [f"Insufficient stock for {label}: requested {requested}, available {available}"]}
        super().__init__(self.messages)
        self.product_id = str(product_id)
        self.requested = requested
        self.available = available


class AuthenticationError(ProteanExceptionWithMessage):
    """Credentials or bearer token could not be verified."""
