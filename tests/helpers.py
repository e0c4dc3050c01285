"""
Test data builders shared by unit and integration tests.
"""

from datetime import datetime, timezone

from bank_onboarding.domain.models import (
    BankBasicInfo,
    BankDetailsInfo,
    BankFullDetails,
    BankRegistrationForm,
    SupportingDocument,
)

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

PDF_MIME = "application/pdf"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def make_form(**overrides: str) -> BankRegistrationForm:
    """Build a valid Step 1 form, overriding selected fields."""
    values = {
        "full_name": "Mr. A",
        "email": "a@bank.com",
        "phone_number": "+2348012345678",
        "password": "secret1",
        "confirm_password": "secret1",
    }
    values.update(overrides)
    return BankRegistrationForm(**values)


def make_basic_info() -> BankBasicInfo:
    return BankBasicInfo(full_name="Mr. A", email="a@bank.com", phone_number="+2348012345678")


def make_document(
    filename: str = "licence.pdf", content_type: str = PDF_MIME, size: int = 1024
) -> SupportingDocument:
    return SupportingDocument(filename=filename, content_type=content_type, data=b"x" * size)


def make_details(**overrides: object) -> BankDetailsInfo:
    """Build valid Step 2 details without a document, overriding selected fields."""
    values: dict[str, object] = {
        "bank_name": "First Example Bank",
        "registration_number": "RC123456",
        "head_office_address": "24, Awolowo, Ibadan",
        "num_agents": 72,
    }
    values.update(overrides)
    return BankDetailsInfo(**values)  # type: ignore[arg-type]


def make_full_details(**overrides: object) -> BankFullDetails:
    """Build a Step 3 payload as Step 2 would have stored it."""
    data = BankFullDetails.merge(make_basic_info(), make_details(), "secret1", None).to_dict()
    data.update(overrides)
    return BankFullDetails.from_dict(data)
