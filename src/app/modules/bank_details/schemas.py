"""Bank details schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class BankDetailsUpdate(BaseModel):
    """Fields left out are not changed."""

    iban: str | None = Field(None, max_length=42)
    bic: str | None = Field(None, max_length=11)
    account_holder: str | None = Field(None, max_length=200)


class BankDetailsUpdateResponse(BaseModel):
    has_iban: bool
    has_bic: bool
    iban_masked: str | None = None
    bic_masked: str | None = None
    account_holder: str | None = None
    updated_at: datetime | None = None


class BankDetails(BaseModel):
    """Decrypted bank details."""

    iban: str | None = None
    bic: str | None = None
    account_holder: str | None = None
    updated_at: datetime | None = None


class TeacherSummary(BaseModel):
    user_id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None


class TeacherBankDetails(BaseModel):
    teacher: TeacherSummary
    bank_details: BankDetails
