"""
Checkout errors raised for misuse of the workflow
"""


class CheckoutError(Exception):
    """Base class for checkout workflow errors."""


class EmptyCartError(CheckoutError):
    """Checkout was started with nothing in the cart."""


class IllegalTransitionError(CheckoutError):
    """The requested step change is not in the transition table."""

    def __init__(self, step, event):
        self.step = step
        self.event = event
        super().__init__(f"Cannot apply '{event.value}' while checkout is at '{step.value}'")


class CheckoutInProgressError(CheckoutError):
    """The checkout cannot be closed while an order is being placed."""


class NoActiveCheckoutError(CheckoutError):
    """No checkout session has been started."""
