"""
Domain layer - Pure business logic with zero framework imports.

This package contains the bank registration State Machine, its step
controllers and validation rules. It defines its own port interfaces for
the identity provider, document store, profile record store, ephemeral
store and notifier, ensuring true hexagonal architecture decoupling.
"""

from .controllers import AuthContext, RegistrationFlow, StepOutcome
from .ephemeral import RegistrationStateStore
from .exceptions import (
    AuthenticationFailed,
    CollaboratorError,
    DocumentUploadFailed,
    EmailAlreadyInUse,
    RecordStoreUnavailable,
    RegistrationError,
    StateStoreUnavailable,
)
from .models import (
    BankBasicInfo,
    BankDetailsInfo,
    BankFullDetails,
    BankRegistrationForm,
    Identity,
    Session,
    SupportingDocument,
)
from .ports import (
    DocumentStore,
    EphemeralStore,
    IdentityProvider,
    NoticeKind,
    Notifier,
    ProfileRecordStore,
    RegistrationState,
    TransitionOutcome,
)
from .registration import RegistrationStateMachine, TransitionResult

__all__ = [
    "AuthContext",
    "AuthenticationFailed",
    "BankBasicInfo",
    "BankDetailsInfo",
    "BankFullDetails",
    "BankRegistrationForm",
    "CollaboratorError",
    "DocumentStore",
    "DocumentUploadFailed",
    "EmailAlreadyInUse",
    "EphemeralStore",
    "Identity",
    "IdentityProvider",
    "NoticeKind",
    "Notifier",
    "ProfileRecordStore",
    "RecordStoreUnavailable",
    "RegistrationError",
    "RegistrationFlow",
    "RegistrationState",
    "RegistrationStateMachine",
    "RegistrationStateStore",
    "Session",
    "StateStoreUnavailable",
    "StepOutcome",
    "SupportingDocument",
    "TransitionOutcome",
    "TransitionResult",
]
