"""
Step controllers - One per registration stage.

Each controller takes the form input of its stage, invokes the matching
state machine transition, posts a notification, and reports where the
user should go next. Controllers never navigate themselves.
"""

from collections.abc import Callable
from dataclasses import dataclass

from .models import BankDetailsInfo, BankRegistrationForm, Session
from .otp import OtpInput
from .ports import NoticeKind, Notifier, RegistrationState, TransitionOutcome
from .registration import RegistrationStateMachine, TransitionResult, step_path


@dataclass
class AuthContext:
    """Session shared by the step controllers of one flow."""

    session: Session | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None


@dataclass(frozen=True)
class StepOutcome:
    """Transition result plus the navigation target, None to stay on the step."""

    result: TransitionResult
    navigate_to: str | None

    @property
    def ok(self) -> bool:
        return self.result.ok


class StepController:
    """Shared submit handling: in-flight guard, notification, navigation."""

    def __init__(
        self, machine: RegistrationStateMachine, notifier: Notifier, auth: AuthContext
    ) -> None:
        self.machine = machine
        self.notifier = notifier
        self.auth = auth
        self.submitting = False

    def _run(
        self, transition: Callable[[], TransitionResult], success_message: str
    ) -> StepOutcome:
        if self.submitting:
            result = TransitionResult(
                TransitionOutcome.IN_PROGRESS,
                self.machine.current_state(self.auth.session),
                "Submission already in progress",
            )
            return StepOutcome(result, None)

        self.submitting = True
        try:
            result = transition()
        finally:
            self.submitting = False

        if result.ok:
            self.notifier.notify(NoticeKind.SUCCESS, success_message)
            return StepOutcome(result, step_path(result.state))

        self.notifier.notify(NoticeKind.ERROR, result.reason)
        return StepOutcome(result, result.redirect_to)

    def _redirect(self, state: RegistrationState, reason: str) -> StepOutcome:
        outcome = (
            TransitionOutcome.UNREACHABLE
            if state == RegistrationState.VERIFIED
            else TransitionOutcome.MISSING_PREDECESSOR
        )
        result = TransitionResult(outcome, state, reason)
        if reason:
            self.notifier.notify(NoticeKind.INFO, reason)
        return StepOutcome(result, step_path(state))


class BasicInfoController(StepController):
    """Step 1: account creation."""

    def submit(self, form: BankRegistrationForm) -> StepOutcome:
        return self._run(
            lambda: self.machine.submit_basic_info(form),
            "Account created successfully. Please complete your bank details",
        )


class DetailsController(StepController):
    """Step 2: business details and supporting document."""

    def load(self) -> StepOutcome | None:
        """Redirect to START when the page is opened without Step 1's payload."""
        if self.machine.current_state(self.auth.session) == RegistrationState.START:
            return self._redirect(
                RegistrationState.START, "Please complete your basic information first"
            )
        return None

    def submit(self, details: BankDetailsInfo) -> StepOutcome:
        if self.auth.is_authenticated:
            message = "Bank registration completed successfully"
        else:
            message = "Bank details saved. Enter the verification code sent to your email"
        return self._run(
            lambda: self.machine.submit_details(details, self.auth.session),
            message,
        )


class VerificationController(StepController):
    """Step 3: verification code entry."""

    def __init__(
        self, machine: RegistrationStateMachine, notifier: Notifier, auth: AuthContext
    ) -> None:
        super().__init__(machine, notifier, auth)
        self.otp = OtpInput()

    def load(self) -> StepOutcome | None:
        """Skip past verification when signed in, restart without a payload."""
        if self.auth.is_authenticated:
            return self._redirect(RegistrationState.VERIFIED, "")
        if self.machine.current_state() != RegistrationState.DETAILS_COLLECTED:
            return self._redirect(
                RegistrationState.START, "Please complete your bank details first"
            )
        return None

    def enter(self, index: int, value: str) -> StepOutcome | None:
        """Type into cell `index`; filling the last cell submits the code."""
        if self.otp.enter(index, value):
            return self.submit()
        return None

    def backspace(self, index: int) -> None:
        self.otp.backspace(index)

    def submit(self) -> StepOutcome:
        return self.submit_code(self.otp.value)

    def submit_code(self, code: str) -> StepOutcome:
        outcome = self._run(
            lambda: self.machine.verify(code, self.auth.session),
            "Your bank is registered!",
        )
        if outcome.ok:
            self.auth.session = outcome.result.session
        elif outcome.result.outcome != TransitionOutcome.IN_PROGRESS:
            self.otp.clear()
        return outcome


@dataclass
class RegistrationFlow:
    """The three step controllers wired to one machine, notifier and session."""

    machine: RegistrationStateMachine
    auth: AuthContext
    basic_info: BasicInfoController
    details: DetailsController
    verification: VerificationController

    @classmethod
    def build(
        cls, machine: RegistrationStateMachine, notifier: Notifier, auth: AuthContext
    ) -> "RegistrationFlow":
        return cls(
            machine=machine,
            auth=auth,
            basic_info=BasicInfoController(machine, notifier, auth),
            details=DetailsController(machine, notifier, auth),
            verification=VerificationController(machine, notifier, auth),
        )

    def current_state(self) -> RegistrationState:
        return self.machine.current_state(self.auth.session)

    def abandon(self) -> TransitionResult:
        return self.machine.abandon()
