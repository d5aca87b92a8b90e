"""Error types shared across the storefront."""


class MatelliError(Exception):
    """Base class for storefront errors."""


class ValidationError(MatelliError):
    """Input rejected before reaching the store."""


class MealValidationError(ValidationError):
    """A catalog entry is missing required fields or has invalid values."""


class SelectionError(ValidationError):
    """A kit selection or cart operation referenced an unknown slot or meal."""


class CheckoutError(ValidationError):
    """A checkout was attempted with an incomplete kit or an empty cart."""


class NotFoundError(MatelliError):
    """A referenced record does not exist."""


class MealNotFoundError(NotFoundError):
    """The meal id is not in the catalog."""


class OrderNotFoundError(NotFoundError):
    """The order id is not in the store."""


class TrackerNotFoundError(NotFoundError):
    """The QR tracker id is not in the store."""


class PersistenceError(MatelliError):
    """A read or write against the document store failed."""


class DuplicateOrderIdError(PersistenceError):
    """The store already holds an order with the generated id."""
