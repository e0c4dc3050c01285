"""
Domain models - Registration payloads and identity value objects.

Payloads that cross a step boundary (BankBasicInfo, BankFullDetails) are
plain dataclasses with dict conversion for the ephemeral store. The
supporting document bytes only ever live inside a single step.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any


@dataclass(frozen=True)
class Identity:
    """Account created by the identity provider."""

    uid: str
    email: str
    role: str


@dataclass(frozen=True)
class Session:
    """Authenticated session for an identity."""

    uid: str
    email: str


@dataclass(frozen=True)
class BankRegistrationForm:
    """Step 1 form input."""

    full_name: str
    email: str
    phone_number: str
    password: str
    confirm_password: str


@dataclass(frozen=True)
class BankBasicInfo:
    """Identity fields collected at Step 1."""

    full_name: str
    email: str
    phone_number: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BankBasicInfo":
        return cls(
            full_name=data["full_name"],
            email=data["email"],
            phone_number=data["phone_number"],
        )


@dataclass(frozen=True)
class SupportingDocument:
    """Transient handle to an uploaded file, exchanged for a URL at Step 2."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class BankDetailsInfo:
    """Business fields collected at Step 2."""

    bank_name: str
    registration_number: str
    head_office_address: str
    num_agents: int | None = None
    supporting_document: SupportingDocument | None = None

    def record_fields(self) -> dict[str, Any]:
        """
        Business fields as stored on the profile record (no document bytes).

        An omitted agent count is left out so a merge keeps the stored one.
        """
        data: dict[str, Any] = {
            "bank_name": self.bank_name,
            "registration_number": self.registration_number,
            "head_office_address": self.head_office_address,
        }
        if self.num_agents is not None:
            data["num_agents"] = self.num_agents
        return data


@dataclass(frozen=True)
class BankFullDetails:
    """
    Union of Step 1 and Step 2 payloads, consumed by Step 3.

    Carries the Step 1 password so verification can sign in before any
    durable record exists.
    """

    full_name: str
    email: str
    phone_number: str
    bank_name: str
    registration_number: str
    head_office_address: str
    password: str
    num_agents: int | None = None
    supporting_document_url: str | None = None

    @classmethod
    def merge(
        cls,
        basic: BankBasicInfo,
        details: BankDetailsInfo,
        password: str,
        supporting_document_url: str | None,
    ) -> "BankFullDetails":
        return cls(
            full_name=basic.full_name,
            email=basic.email,
            phone_number=basic.phone_number,
            bank_name=details.bank_name,
            registration_number=details.registration_number,
            head_office_address=details.head_office_address,
            num_agents=details.num_agents,
            supporting_document_url=supporting_document_url,
            password=password,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BankFullDetails":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def record_fields(self) -> dict[str, Any]:
        """All collected fields except the cached password and unset optionals."""
        data = self.to_dict()
        data.pop("password")
        for optional in ("num_agents", "supporting_document_url"):
            if data[optional] is None:
                data.pop(optional)
        return data
