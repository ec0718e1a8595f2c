"""
Pure business rules for the exchange bounded context.

Password policy, KYC completeness evaluation and small naming rules.
No IO and no framework imports.
"""

import random
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from app.domain.exchange.entities import KycRecord, KycStatus
from app.domain.exchange.errors import ValidationFailedError, WeakPasswordError

MIN_PASSWORD_LENGTH = 10
_PASSWORD_CLASSES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"\d"),
    re.compile(r"[!@#$%^&*()_+~`|}{\[\]:;?><,./\\=-]"),
)

# Internal attribute name -> name the client form uses.
REQUIRED_KYC_FIELDS = {
    "full_name": "fullName",
    "date_of_birth": "dateOfBirth",
    "address": "address",
    "document_url": "documentImage",
}

KYC_CLIENT_LABELS = {
    KycStatus.APPROVED: "Verified",
    KycStatus.PENDING: "Pending Review",
    KycStatus.REJECTED: "Rejected",
    KycStatus.UNSUBMITTED: "Not Verified",
}


def validate_password(password: str) -> None:
    """Raise WeakPasswordError unless the password satisfies the policy."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )
    if not all(pattern.search(password) for pattern in _PASSWORD_CLASSES):
        raise WeakPasswordError(
            "Password must contain at least one uppercase letter, one "
            "lowercase letter, one number, and one symbol."
        )


def generate_username(email: str, rng: Optional[random.Random] = None) -> str:
    """Build a username from the email local part plus a 4-digit suffix."""
    rng = rng or random.Random()
    base = re.sub(r"[^a-zA-Z0-9]", "", email.split("@")[0]) or "user"
    return f"{base}{rng.randint(0, 999):04d}"


@dataclass(frozen=True)
class KycEvaluation:
    """Effective KYC state of a user and what is still missing."""

    status: KycStatus
    missing_fields: list[str]

    @property
    def label(self) -> str:
        return KYC_CLIENT_LABELS[self.status]

    @property
    def is_approved(self) -> bool:
        return self.status is KycStatus.APPROVED


def _is_missing(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def evaluate_kyc(record: Optional[KycRecord]) -> KycEvaluation:
    """Derive the effective KYC status from the latest record.

    No record means unsubmitted with every required field missing. An
    approved record is final. Otherwise an incomplete record counts as
    unsubmitted regardless of its stored status.
    """
    if record is None:
        return KycEvaluation(
            KycStatus.UNSUBMITTED, list(REQUIRED_KYC_FIELDS.values())
        )
    if record.status is KycStatus.APPROVED:
        return KycEvaluation(KycStatus.APPROVED, [])

    missing = [
        client_name
        for attr, client_name in REQUIRED_KYC_FIELDS.items()
        if _is_missing(getattr(record, attr))
    ]
    if missing:
        return KycEvaluation(KycStatus.UNSUBMITTED, missing)
    return KycEvaluation(record.status, [])


def parse_choice(enum_cls, value: str, label: str):
    """Return the member of ``enum_cls`` whose value is ``value``.

    Raises:
        ValidationFailedError: If no member matches.
    """
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationFailedError(f"Invalid {label}. Must be one of: {allowed}") from None


def ensure_finite(**amounts: Optional[Decimal]) -> None:
    """Reject NaN and infinite amounts before any arithmetic touches them.

    Raises:
        ValidationFailedError: Naming the first non-finite amount.
    """
    for label, value in amounts.items():
        if value is not None and not value.is_finite():
            raise ValidationFailedError(f"{label.capitalize()} must be a finite number.")


def format_quantity(quantity: Decimal) -> str:
    """Render a quantity without exponent or trailing zeros."""
    return format(quantity.normalize(), "f")


def format_money(amount: Decimal) -> str:
    return f"${amount:.2f}"
