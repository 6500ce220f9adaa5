from django.core.exceptions import (ObjectDoesNotExist, PermissionDenied,
                                    ValidationError)


class InvalidAmount(ValidationError):
    """Raised when a payment or distribution amount is negative or exceeds what is owed."""
    pass


class NotFound(ObjectDoesNotExist):
    """Raised when an invoice, unit, tenant, property or settlement does not exist."""
    pass


class AccessDenied(PermissionDenied):
    """Raised when the caller lacks the role to act on a property."""
    pass
