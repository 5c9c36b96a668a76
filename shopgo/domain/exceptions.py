from __future__ import annotations


class DomainError(Exception):
    """Base for expected, caller-recoverable domain errors."""


class DuplicateIdentityError(DomainError):
    """Email is already registered."""


class InvalidCredentialsError(DomainError):
    """Unknown email or wrong password."""


class MalformedCredentialError(DomainError):
    """Refresh credential could not be parsed."""


class InvalidSessionError(DomainError):
    """Refresh session is absent or its secret does not verify."""


class SessionExpiredError(DomainError):
    """Refresh session is past its expiry."""


class InvalidTokenError(DomainError):
    """Access token failed structure, signature or expiry checks."""


class NotFoundError(DomainError):
    """Requested record does not exist."""


class MissingReferenceError(DomainError):
    """Payment reference id is empty."""


class MissingUserError(DomainError):
    """User id is empty."""


class OrderAlreadyExistsError(DomainError):
    """An order for the payment reference was inserted concurrently."""


class EmptyCartError(DomainError):
    """Cart has nothing to pay for."""


class PaymentGatewayError(DomainError):
    """Payment provider rejected the request or the webhook signature."""


class StorageFailureError(Exception):
    """A persistence or upstream collaborator is unavailable."""
