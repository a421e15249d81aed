"""Exceptions carrying German, user-facing messages."""


class BallTicketsError(Exception):
    """Base class. `message` is safe to show to the user."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class PurchaseError(BallTicketsError):
    """A purchase or payment confirmation precondition was violated."""


class AdminValidationError(BallTicketsError):
    """An admin update was rejected."""


class PaymentProviderError(BallTicketsError):
    """The payment provider could not be reached or rejected a request."""


class MailDeliveryError(BallTicketsError):
    """The mail API could not deliver a message."""
