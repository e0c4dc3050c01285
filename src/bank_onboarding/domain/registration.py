"""
Registration domain service - Bank onboarding State Machine.

This module contains the core business logic for registering a bank,
implementing a three-step pipeline whose intermediate state lives in an
ephemeral store until a durable profile record exists.

Registration State Machine (Forward-Only Transitions)
=====================================================

States:
- START: No registration payload present
- BASIC_INFO_COLLECTED: Account created, identity fields stored
- DETAILS_COLLECTED: Business details merged and stored, awaiting code
- VERIFIED: Profile record written (terminal)

Valid Transitions:
    START -> BASIC_INFO_COLLECTED              submit_basic_info()
    BASIC_INFO_COLLECTED -> DETAILS_COLLECTED  submit_details(), no session
    BASIC_INFO_COLLECTED -> VERIFIED           submit_details(), with session
    DETAILS_COLLECTED -> VERIFIED              verify()
    any -> START                               abandon()

Completion Paths (mutually exclusive, chosen by session presence):
- Authenticated: details are merged into the existing profile record
  immediately and verification is skipped.
- Fresh signup: the record is created only after verification signs the
  new account in with the credentials carried in the ephemeral payload.

Every transition returns a TransitionResult rather than raising or
navigating. Collaborator calls are made one at a time, in order, and any
CollaboratorError aborts the attempt with the state left unchanged.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .ephemeral import FULL_DETAILS_KEY, RegistrationStateStore
from .exceptions import CollaboratorError
from .models import (
    BankBasicInfo,
    BankDetailsInfo,
    BankFullDetails,
    BankRegistrationForm,
    Session,
)
from .ports import (
    DocumentStore,
    IdentityProvider,
    ProfileRecordStore,
    RegistrationState,
    TransitionOutcome,
)
from .validation import (
    first_failure,
    validate_agent_count,
    validate_document_size,
    validate_document_type,
    validate_email,
    validate_password,
    validate_password_match,
    validate_required,
    validate_verification_code,
)

logger = logging.getLogger(__name__)

BANK_ROLE = "bank"

STEP_PATHS = {
    RegistrationState.START: "/register/bank",
    RegistrationState.BASIC_INFO_COLLECTED: "/register/bank/details",
    RegistrationState.DETAILS_COLLECTED: "/register/bank/verification",
    RegistrationState.VERIFIED: "/bank/dashboard",
}

MISSING_PREDECESSOR_REASON = "Registration session not found. Please start your registration again"


def step_path(state: RegistrationState) -> str:
    """Navigation target for the step reachable in `state`."""
    return STEP_PATHS[state]


@dataclass(frozen=True)
class TransitionResult:
    """
    Outcome of one transition attempt.

    `state` is the state after the attempt: the next state on success, the
    unchanged state on failure, START for a missing predecessor.
    """

    outcome: TransitionOutcome
    state: RegistrationState
    reason: str = ""
    session: Session | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == TransitionOutcome.ADVANCED

    @property
    def redirect_to(self) -> str | None:
        """Navigation target forced by the result, if any."""
        if self.outcome in (TransitionOutcome.MISSING_PREDECESSOR, TransitionOutcome.UNREACHABLE):
            return step_path(self.state)
        return None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RegistrationStateMachine:
    """
    Domain service for bank registration.

    Orchestrates the identity provider, document store and profile record
    store around the ephemeral registration state.
    """

    identity_provider: IdentityProvider
    document_store: DocumentStore
    record_store: ProfileRecordStore
    state_store: RegistrationStateStore
    clock: Callable[[], datetime] = field(default=_utcnow)

    def current_state(self, session: Session | None = None) -> RegistrationState:
        """
        Resolve the reachable state from persisted ephemeral state and auth.

        An authenticated user may always complete outstanding details.

        Raises:
            StateStoreUnavailable: If the ephemeral store cannot be read
        """
        if session is not None:
            return RegistrationState.BASIC_INFO_COLLECTED
        if self.state_store.get_full_details() is not None:
            return RegistrationState.DETAILS_COLLECTED
        if (
            self.state_store.get_basic_info() is not None
            and self.state_store.get_pending_password() is not None
        ):
            return RegistrationState.BASIC_INFO_COLLECTED
        return RegistrationState.START

    def submit_basic_info(self, form: BankRegistrationForm) -> TransitionResult:
        """
        Create the bank account and store identity fields.

        Args:
            form: Step 1 form input

        Returns:
            ADVANCED to BASIC_INFO_COLLECTED, or a failure leaving START
        """
        check = first_failure(
            [
                validate_required("Full name", form.full_name),
                validate_required("Phone number", form.phone_number),
                validate_email(form.email),
                validate_password(form.password),
                validate_password_match(form.password, form.confirm_password),
            ]
        )
        if not check.ok:
            return self._fail(TransitionOutcome.INVALID_INPUT, RegistrationState.START, check.reason)

        try:
            self.identity_provider.create_account(
                form.email,
                form.password,
                BANK_ROLE,
                {"display_name": form.full_name, "phone_number": form.phone_number},
            )
            # A new registration replaces whatever an abandoned one left behind
            self.state_store.remove(FULL_DETAILS_KEY)
            self.state_store.put_basic_info(
                BankBasicInfo(
                    full_name=form.full_name,
                    email=form.email,
                    phone_number=form.phone_number,
                )
            )
            self.state_store.put_pending_password(form.password)
        except CollaboratorError as e:
            logger.warning("Account creation rejected: %s", e)
            return self._fail(TransitionOutcome.COLLABORATOR_FAILED, RegistrationState.START, str(e))

        return TransitionResult(TransitionOutcome.ADVANCED, RegistrationState.BASIC_INFO_COLLECTED)

    def submit_details(
        self, details: BankDetailsInfo, session: Session | None = None
    ) -> TransitionResult:
        """
        Store business details, completing registration when authenticated.

        Without a session, Step 1's payload must be present; its absence
        redirects to START before any collaborator is called.

        Args:
            details: Step 2 form input, optionally with a supporting document
            session: Current authenticated session, if any

        Returns:
            ADVANCED to VERIFIED (session) or DETAILS_COLLECTED (no session)
        """
        basic: BankBasicInfo | None = None
        password: str | None = None
        if session is None:
            try:
                basic = self.state_store.get_basic_info()
                password = self.state_store.get_pending_password()
            except CollaboratorError as e:
                logger.warning("Registration state unavailable: %s", e)
                return self._fail(
                    TransitionOutcome.COLLABORATOR_FAILED,
                    RegistrationState.BASIC_INFO_COLLECTED,
                    str(e),
                )
            if basic is None or password is None:
                return self._fail(
                    TransitionOutcome.MISSING_PREDECESSOR,
                    RegistrationState.START,
                    MISSING_PREDECESSOR_REASON,
                )

        checks = [
            validate_required("Bank name", details.bank_name),
            validate_required("Registration number", details.registration_number),
            validate_required("Head office address", details.head_office_address),
            validate_agent_count(details.num_agents),
        ]
        document = details.supporting_document
        if document is not None:
            checks.append(validate_document_type(document.content_type))
            checks.append(validate_document_size(document.size))
        check = first_failure(checks)
        if not check.ok:
            return self._fail(
                TransitionOutcome.INVALID_INPUT,
                RegistrationState.BASIC_INFO_COLLECTED,
                check.reason,
            )

        document_url: str | None = None
        try:
            if document is not None:
                owner = session.uid if session is not None else basic.email
                path_hint = self._document_path(owner, document.filename)
                locator = self.document_store.upload(path_hint, document.data, document.content_type)
                document_url = self.document_store.resolve_url(locator)

            if session is not None:
                fields: dict[str, Any] = details.record_fields()
                if document_url is not None:
                    fields["supporting_document_url"] = document_url
                fields["registration_completed"] = True
                fields["updated_at"] = self.clock().isoformat()
                self.record_store.create_or_merge(session.uid, fields)
                logger.info("Registration completed for authenticated identity %s", session.uid)
                return TransitionResult(
                    TransitionOutcome.ADVANCED, RegistrationState.VERIFIED, session=session
                )

            self.state_store.put_full_details(
                BankFullDetails.merge(basic, details, password, document_url)
            )
        except CollaboratorError as e:
            logger.warning("Details submission failed: %s", e)
            return self._fail(
                TransitionOutcome.COLLABORATOR_FAILED,
                RegistrationState.BASIC_INFO_COLLECTED,
                str(e),
            )

        return TransitionResult(TransitionOutcome.ADVANCED, RegistrationState.DETAILS_COLLECTED)

    def verify(self, code: str, session: Session | None = None) -> TransitionResult:
        """
        Accept the verification code and persist the profile record.

        Steps, in order: sign in with the stored credentials, create the
        profile record, send the verification email (best-effort), clear
        the ephemeral payload. A failure in the first two keeps the payload
        so the user can retry without re-entering details.

        Args:
            code: Six-character verification code
            session: Current authenticated session, if any

        Returns:
            ADVANCED to VERIFIED with the new session
        """
        if session is not None:
            return self._fail(
                TransitionOutcome.UNREACHABLE,
                RegistrationState.VERIFIED,
                "Registration is already complete",
            )

        try:
            full = self.state_store.get_full_details()
        except CollaboratorError as e:
            logger.warning("Registration state unavailable: %s", e)
            return self._fail(
                TransitionOutcome.COLLABORATOR_FAILED, RegistrationState.DETAILS_COLLECTED, str(e)
            )
        if full is None:
            return self._fail(
                TransitionOutcome.MISSING_PREDECESSOR,
                RegistrationState.START,
                MISSING_PREDECESSOR_REASON,
            )

        check = validate_verification_code(code)
        if not check.ok:
            return self._fail(
                TransitionOutcome.INVALID_INPUT, RegistrationState.DETAILS_COLLECTED, check.reason
            )

        try:
            new_session = self.identity_provider.sign_in(full.email, full.password)
            fields = full.record_fields()
            fields.update(
                {
                    "role": BANK_ROLE,
                    "email_verified": True,
                    "registration_completed": True,
                    "created_at": self.clock().isoformat(),
                }
            )
            self.record_store.create_or_merge(new_session.uid, fields)
        except CollaboratorError as e:
            logger.warning("Verification failed for %s: %s", full.email, e)
            return self._fail(
                TransitionOutcome.COLLABORATOR_FAILED, RegistrationState.DETAILS_COLLECTED, str(e)
            )

        try:
            self.identity_provider.send_verification_email(new_session)
        except CollaboratorError as e:
            logger.warning("Verification email not sent to %s: %s", full.email, e)

        try:
            self.state_store.clear()
        except CollaboratorError as e:
            logger.warning("Registration state not cleared for %s: %s", new_session.uid, e)

        logger.info("Registration verified for identity %s", new_session.uid)
        return TransitionResult(
            TransitionOutcome.ADVANCED, RegistrationState.VERIFIED, session=new_session
        )

    def abandon(self) -> TransitionResult:
        """Discard all ephemeral registration state and return to START."""
        try:
            self.state_store.clear()
        except CollaboratorError as e:
            logger.warning("Registration state not cleared: %s", e)
            return self._fail(TransitionOutcome.COLLABORATOR_FAILED, RegistrationState.START, str(e))
        return TransitionResult(TransitionOutcome.ADVANCED, RegistrationState.START)

    def _document_path(self, owner: str, filename: str) -> str:
        timestamp = int(self.clock().timestamp() * 1000)
        return f"bank_documents/{owner}/{timestamp}_{filename}"

    def _fail(
        self, outcome: TransitionOutcome, state: RegistrationState, reason: str
    ) -> TransitionResult:
        return TransitionResult(outcome=outcome, state=state, reason=reason)
