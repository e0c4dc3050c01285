"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the registration domain
requires from its external collaborators. Adapters implement these
protocols by structural subtyping.
"""

from enum import Enum
from typing import Any, Protocol

from .models import Identity, Session


class RegistrationState(str, Enum):
    """
    Registration State Machine states for the bank onboarding pipeline.

    State Transitions (forward-only):
    - START -> BASIC_INFO_COLLECTED (account created)
    - BASIC_INFO_COLLECTED -> DETAILS_COLLECTED (details stored, unauthenticated)
    - BASIC_INFO_COLLECTED -> VERIFIED (details merged, authenticated)
    - DETAILS_COLLECTED -> VERIFIED (verification code accepted)

    Terminal States:
    - VERIFIED: Registration complete, dashboard access

    Note: START is re-entered when a predecessor payload is missing or the
    flow is abandoned.
    """

    START = "START"
    BASIC_INFO_COLLECTED = "BASIC_INFO_COLLECTED"
    DETAILS_COLLECTED = "DETAILS_COLLECTED"
    VERIFIED = "VERIFIED"


class TransitionOutcome(Enum):
    """
    Result of a transition attempt.

    Only ADVANCED moves the state machine; every other value leaves it
    where it was (MISSING_PREDECESSOR and UNREACHABLE carry a redirect).
    """

    ADVANCED = "advanced"
    INVALID_INPUT = "invalid_input"
    MISSING_PREDECESSOR = "missing_predecessor"
    COLLABORATOR_FAILED = "collaborator_failed"
    UNREACHABLE = "unreachable"
    IN_PROGRESS = "in_progress"


class NoticeKind(str, Enum):
    """Kinds of user-facing notifications."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class IdentityProvider(Protocol):
    """Port interface for account creation and authentication."""

    def create_account(
        self, email: str, password: str, role: str, profile_hints: dict[str, Any]
    ) -> Identity:
        """
        Create a new account tagged with the given role.

        Args:
            email: Email address as entered by the user
            password: Plaintext password (hashed by the provider)
            role: Role tag, "bank" for this flow
            profile_hints: Optional display name / phone number

        Returns:
            The created identity

        Raises:
            EmailAlreadyInUse: If an account already exists for the email
            CollaboratorError: On any other provider rejection
        """
        ...

    def sign_in(self, email: str, password: str) -> Session:
        """
        Authenticate with email and password.

        Raises:
            AuthenticationFailed: If the credentials are rejected
        """
        ...

    def send_verification_email(self, session: Session) -> None:
        """Trigger a verification email for the signed-in identity."""
        ...


class DocumentStore(Protocol):
    """Port interface for supporting document storage."""

    def upload(self, path_hint: str, data: bytes, content_type: str) -> str:
        """
        Store document bytes.

        Returns:
            Opaque locator for the stored document

        Raises:
            DocumentUploadFailed: If the document cannot be stored
        """
        ...

    def resolve_url(self, locator: str) -> str:
        """Return a retrievable URL for a stored document."""
        ...


class ProfileRecordStore(Protocol):
    """Port interface for the durable profile record."""

    def create_or_merge(self, identity_id: str, fields: dict[str, Any]) -> None:
        """
        Create the record or merge fields into it.

        Fields not present in `fields` are preserved.

        Raises:
            RecordStoreUnavailable: If the write fails
        """
        ...


class EphemeralStore(Protocol):
    """
    Port interface for the reload-durable key -> JSON string mapping.

    Every method raises StateStoreUnavailable when the backing store fails.
    """

    def put(self, key: str, value: str) -> None: ...

    def get(self, key: str) -> str | None: ...

    def remove(self, key: str) -> None: ...


class Notifier(Protocol):
    """Port interface for fire-and-forget user-facing messages."""

    def notify(self, kind: NoticeKind, message: str) -> None: ...
