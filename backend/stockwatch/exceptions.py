"""Service-layer error kinds and their HTTP mapping.

Services raise these; controllers translate them to `HTTPException`
via `raise_http` so every endpoint maps errors the same way.
"""

from fastapi import HTTPException


class ServiceError(Exception):
    """Base class for expected failures raised by services."""

    status_code = 500


class NotFoundError(ServiceError):
    """A referenced entity id (or natural key) does not exist."""

    status_code = 404


class ConflictError(ServiceError):
    """A natural key is already taken.

    Raised both by uniqueness pre-checks and when the store rejects a
    write with a unique constraint violation.
    """

    status_code = 409


class InvalidMembershipError(ServiceError):
    """A stock was removed from a group it does not belong to."""

    status_code = 404


def raise_http(exc: ServiceError) -> None:
    """Map a service error to HTTP and raise HTTPException. Never returns."""
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
