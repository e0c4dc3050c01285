"""
Validation rules - Pure predicates for registration input.

Each rule returns a ValidationResult with a human-readable reason on
failure. The caller decides whether a failure blocks submission; none of
these functions has side effects.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
VERIFICATION_CODE_LENGTH = 6
MAX_DOCUMENT_BYTES = 5 * 1024 * 1024

ALLOWED_DOCUMENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "text/csv",
    }
)


@dataclass(frozen=True)
class ValidationResult:
    """Pass/fail with the reason shown to the user on failure."""

    ok: bool
    reason: str = ""

    @classmethod
    def passed(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failed(cls, reason: str) -> "ValidationResult":
        return cls(ok=False, reason=reason)


def validate_email(email: str) -> ValidationResult:
    if not EMAIL_PATTERN.match(email):
        return ValidationResult.failed("Please enter a valid email address")
    return ValidationResult.passed()


def validate_password(password: str) -> ValidationResult:
    if len(password) < MIN_PASSWORD_LENGTH:
        return ValidationResult.failed(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    return ValidationResult.passed()


def validate_password_match(password: str, confirm_password: str) -> ValidationResult:
    if password != confirm_password:
        return ValidationResult.failed("Passwords do not match")
    return ValidationResult.passed()


def validate_required(label: str, value: str) -> ValidationResult:
    if not value or not value.strip():
        return ValidationResult.failed(f"{label} is required")
    return ValidationResult.passed()


def validate_agent_count(num_agents: int | None) -> ValidationResult:
    """Agent count is optional but must be non-negative when given."""
    if num_agents is not None and num_agents < 0:
        return ValidationResult.failed("Number of POS agents cannot be negative")
    return ValidationResult.passed()


def validate_document_type(content_type: str) -> ValidationResult:
    # Browsers may append parameters, e.g. "text/csv; charset=utf-8"
    mime = content_type.split(";", 1)[0].strip().lower()
    if mime not in ALLOWED_DOCUMENT_TYPES:
        return ValidationResult.failed("Please upload a PDF, Excel or CSV file")
    return ValidationResult.passed()


def validate_document_size(size: int) -> ValidationResult:
    if size > MAX_DOCUMENT_BYTES:
        return ValidationResult.failed("File size must be less than 5MB")
    return ValidationResult.passed()


def validate_verification_code(code: str) -> ValidationResult:
    """
    Accept any code of exactly six non-blank characters.

    No challenge is checked against a server-issued value.
    """
    if len(code) != VERIFICATION_CODE_LENGTH or any(not char.strip() for char in code):
        return ValidationResult.failed(
            f"Please enter the complete {VERIFICATION_CODE_LENGTH}-digit verification code"
        )
    return ValidationResult.passed()


def first_failure(results: Iterable[ValidationResult]) -> ValidationResult:
    """Return the first failing result, or a pass if all rules passed."""
    for result in results:
        if not result.ok:
            return result
    return ValidationResult.passed()
