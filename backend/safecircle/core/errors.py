"""Service-layer exceptions.

Services raise these; ``register_error_handlers`` turns them into JSON
responses using ``status_code``. They subclass ``ValueError`` so callers that
only care about "the request was rejected" can keep catching that.
"""

from __future__ import annotations


class ServiceError(ValueError):
    status_code = 400


class NotFound(ServiceError):
    status_code = 404


class Forbidden(ServiceError):
    status_code = 403


class Conflict(ServiceError):
    status_code = 409


class DuplicateRequest(Conflict):
    """A pending friend request already exists for this sender and recipient."""


class AlreadyFriends(Conflict):
    pass


class InvalidTransition(Conflict):
    """The friend request is no longer pending."""


class AlertAlreadyActive(Conflict):
    pass


class UsernameTaken(Conflict):
    pass


class EmailTaken(Conflict):
    pass


class NoFriends(ServiceError):
    pass
