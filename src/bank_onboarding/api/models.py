"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema
generation. Field presence is enforced here; field content is judged by
the domain validation rules so that their messages reach the user.
"""

from pydantic import BaseModel, Field

from bank_onboarding.domain.ports import NoticeKind, RegistrationState


class BasicInfoRequest(BaseModel):
    """Request model for Step 1 (account creation)."""

    full_name: str = Field(..., description="Contact person's full name")
    email: str = Field(..., description="Work email address")
    phone_number: str
    password: str = Field(..., description="Password (min 6 characters)")
    confirm_password: str


class VerificationRequest(BaseModel):
    """Request model for Step 3 (verification)."""

    code: str = Field(..., description="6-character verification code")


class NoticeModel(BaseModel):
    """User-facing notification posted while handling the request."""

    kind: NoticeKind
    message: str


class RegistrationResponse(BaseModel):
    """Response model for a successful step or a state query."""

    state: RegistrationState
    next_step: str
    identity_id: str | None = None
    messages: list[NoticeModel] = []


class ErrorResponse(BaseModel):
    """Error response model; `redirect_to` is set when the flow must restart."""

    detail: str
    redirect_to: str | None = None
    messages: list[NoticeModel] = []


def parse_agent_count(raw: str | None) -> int | None:
    """
    Parse the optional "number of POS agents" form field.

    Raises:
        ValueError: If the value is present but not a whole number
    """
    if raw is None or not raw.strip():
        return None
    return int(raw.strip())
