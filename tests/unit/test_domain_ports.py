"""
Unit tests for domain ports and exceptions.

Tests verify:
- State and outcome enums are properly defined
- Exceptions are properly structured
- Domain purity (zero framework imports)
"""

import subprocess
from enum import Enum

import pytest

from bank_onboarding.domain.exceptions import (
    AuthenticationFailed,
    CollaboratorError,
    DocumentUploadFailed,
    EmailAlreadyInUse,
    RecordStoreUnavailable,
    RegistrationError,
    StateStoreUnavailable,
)
from bank_onboarding.domain.ports import NoticeKind, RegistrationState, TransitionOutcome

DOMAIN_DIR = "src/bank_onboarding/domain/"


class TestRegistrationStateEnum:
    """Tests for RegistrationState enum."""

    def test_registration_state_is_str_enum(self) -> None:
        """RegistrationState uses str mixin for JSON serialization."""
        assert issubclass(RegistrationState, Enum)
        assert issubclass(RegistrationState, str)

    def test_states_in_pipeline_order(self) -> None:
        assert [s.value for s in RegistrationState] == [
            "START",
            "BASIC_INFO_COLLECTED",
            "DETAILS_COLLECTED",
            "VERIFIED",
        ]


class TestTransitionOutcomeEnum:
    """Tests for TransitionOutcome enum."""

    def test_outcome_values(self) -> None:
        assert TransitionOutcome.ADVANCED.value == "advanced"
        assert TransitionOutcome.INVALID_INPUT.value == "invalid_input"
        assert TransitionOutcome.MISSING_PREDECESSOR.value == "missing_predecessor"
        assert TransitionOutcome.COLLABORATOR_FAILED.value == "collaborator_failed"
        assert TransitionOutcome.UNREACHABLE.value == "unreachable"
        assert TransitionOutcome.IN_PROGRESS.value == "in_progress"


class TestNoticeKindEnum:
    def test_notice_kinds(self) -> None:
        assert {k.value for k in NoticeKind} == {"success", "error", "info"}


class TestDomainExceptions:
    """Tests for domain exceptions."""

    def test_registration_error_is_exception(self) -> None:
        assert issubclass(RegistrationError, Exception)

    @pytest.mark.parametrize(
        "exc_type",
        [
            EmailAlreadyInUse,
            AuthenticationFailed,
            DocumentUploadFailed,
            RecordStoreUnavailable,
            StateStoreUnavailable,
        ],
    )
    def test_collaborator_errors(self, exc_type: type[Exception]) -> None:
        """Every collaborator failure is a CollaboratorError and a RegistrationError."""
        assert issubclass(exc_type, CollaboratorError)
        assert issubclass(exc_type, RegistrationError)

    def test_message_preserved(self) -> None:
        with pytest.raises(CollaboratorError) as exc_info:
            raise EmailAlreadyInUse("The email address is already in use by another account.")
        assert str(exc_info.value) == "The email address is already in use by another account."


class TestDomainPurity:
    """Tests for domain purity - zero framework imports."""

    @pytest.mark.parametrize(
        "pattern",
        [
            "from fastapi",
            "import fastapi",
            "from pydantic",
            "import pydantic",
            "from psycopg",
            "import psycopg",
            "import bcrypt",
        ],
    )
    def test_no_framework_imports_in_domain(self, pattern: str) -> None:
        result = subprocess.run(
            ["grep", "-r", pattern, DOMAIN_DIR],
            capture_output=True,
            text=True,
        )
        assert result.returncode != 0, f"Framework import found: {result.stdout}"
