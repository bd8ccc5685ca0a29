"""Service layer exceptions.

Centralized exception hierarchy for the service layer. These never cross the
public service methods: export and publish return result objects instead.
"""


class ServiceError(Exception):
    """Base exception for service errors."""

    pass


class ExportError(ServiceError):
    """Raised when the export pipeline fails after validation passed."""

    pass


class PublishError(ServiceError):
    """Raised when files cannot be prepared for publishing."""

    pass
