"""
Domain exceptions - Semantic error types for bank registration.

Collaborator adapters raise these to communicate failures without leaking
infrastructure details. The message of a CollaboratorError is shown to the
user verbatim, so it must be human-readable.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class CollaboratorError(RegistrationError):
    """An external collaborator rejected the call."""

    pass


class EmailAlreadyInUse(CollaboratorError):
    """An account already exists for this email address."""

    pass


class AuthenticationFailed(CollaboratorError):
    """Email/password pair was rejected by the identity provider."""

    pass


class DocumentUploadFailed(CollaboratorError):
    """The supporting document could not be stored."""

    pass


class RecordStoreUnavailable(CollaboratorError):
    """The profile record could not be written."""

    pass


class StateStoreUnavailable(CollaboratorError):
    """Ephemeral registration state could not be read or written."""

    pass
