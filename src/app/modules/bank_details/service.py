"""
Bank Details Service

Teachers maintain their own IBAN/BIC; administrators read them for payroll.

- Values are validated, then encrypted before they reach the database
- Decrypted values are never logged
- Each administrator read (single view or export) writes an access log row
  per teacher, committed before the data is returned
"""

import logging
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser
from app.core.crypto import decrypt, encrypt, mask_bic, mask_iban
from app.core.exceptions import NotFoundError, ValidationError
from app.modules.bank_details import repository
from app.modules.bank_details.models import AccessType, TeacherProfile
from app.modules.bank_details.schemas import (
    BankDetails,
    BankDetailsUpdate,
    BankDetailsUpdateResponse,
    TeacherBankDetails,
    TeacherSummary,
)
from app.modules.bank_details.validation import (
    format_iban,
    is_valid_account_holder,
    is_valid_bic,
    is_valid_iban,
    normalize,
)
from app.modules.users.models import User, UserRole
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


def _decrypted(profile: TeacherProfile | None) -> BankDetails:
    if profile is None:
        return BankDetails()

    return BankDetails(
        iban=decrypt(profile.iban_encrypted) if profile.iban_encrypted else None,
        bic=decrypt(profile.bic_encrypted) if profile.bic_encrypted else None,
        account_holder=profile.account_holder,
        updated_at=profile.bank_details_updated_at,
    )


def _summary(teacher: User) -> TeacherSummary:
    return TeacherSummary(
        user_id=teacher.id,
        first_name=teacher.first_name,
        last_name=teacher.last_name,
        email=teacher.email,
        phone=teacher.phone,
    )


async def update_bank_details(
    db: AsyncSession,
    teacher: AuthenticatedUser,
    data: BankDetailsUpdate,
) -> BankDetailsUpdateResponse:
    """
    Validate, encrypt and store a teacher's bank details.

    Raises:
        ValidationError: INVALID_IBAN, INVALID_BIC or INVALID_ACCOUNT_HOLDER
        ConfigError: Encryption key missing or malformed
    """
    if data.iban and not is_valid_iban(data.iban):
        raise ValidationError("Invalid IBAN.", error_code="INVALID_IBAN")

    if data.bic and not is_valid_bic(data.bic):
        raise ValidationError("Invalid BIC.", error_code="INVALID_BIC")

    if data.account_holder and not is_valid_account_holder(data.account_holder):
        raise ValidationError("Invalid account holder name.", error_code="INVALID_ACCOUNT_HOLDER")

    values: dict = {}
    if data.iban:
        values["iban_encrypted"] = encrypt(format_iban(data.iban))
    if data.bic:
        values["bic_encrypted"] = encrypt(normalize(data.bic))
    if data.account_holder:
        values["account_holder"] = data.account_holder.strip()

    values["bank_details_updated_at"] = datetime.now(UTC)
    values["bank_details_updated_by"] = teacher.id

    profile = await repository.upsert_profile(db, teacher.id, **values)
    logger.info(f"Bank details updated for teacher {teacher.id}")

    details = _decrypted(profile)
    return BankDetailsUpdateResponse(
        has_iban=profile.iban_encrypted is not None,
        has_bic=profile.bic_encrypted is not None,
        iban_masked=mask_iban(details.iban) if details.iban else None,
        bic_masked=mask_bic(details.bic) if details.bic else None,
        account_holder=profile.account_holder,
        updated_at=profile.bank_details_updated_at,
    )


async def get_own_bank_details(db: AsyncSession, teacher: AuthenticatedUser) -> BankDetails:
    profile = await repository.get_profile(db, teacher.id)
    return _decrypted(profile)


async def get_teacher_bank_details(
    db: AsyncSession,
    admin: AuthenticatedUser,
    teacher_id: int,
    ip_address: str | None = None,
) -> TeacherBankDetails:
    """
    Decrypted bank details of one teacher, for an administrator.

    Raises:
        NotFoundError: TEACHER_NOT_FOUND
        AuthenticationError: Stored ciphertext failed to authenticate
    """
    teacher = await UserRepository.get_by_id(db, teacher_id)
    if teacher is None or teacher.role != UserRole.TEACHER:
        raise NotFoundError("Teacher not found.", error_code="TEACHER_NOT_FOUND")

    details = _decrypted(await repository.get_profile(db, teacher_id))

    repository.add_access_log(
        db,
        teacher_id=teacher_id,
        accessed_by=admin.id,
        access_type=AccessType.VIEW,
        ip_address=ip_address,
    )
    await db.commit()

    logger.info(f"Admin {admin.id} viewed bank details of teacher {teacher_id}")
    return TeacherBankDetails(teacher=_summary(teacher), bank_details=details)


async def export_all_bank_details(
    db: AsyncSession,
    admin: AuthenticatedUser,
    ip_address: str | None = None,
) -> list[TeacherBankDetails]:
    """Decrypted bank details of every teacher, one export log row each."""
    teachers = await UserRepository.list_by_role(db, UserRole.TEACHER)
    profiles = await repository.get_profiles(db, [teacher.id for teacher in teachers])

    export = []
    for teacher in teachers:
        export.append(
            TeacherBankDetails(
                teacher=_summary(teacher),
                bank_details=_decrypted(profiles.get(teacher.id)),
            )
        )
        repository.add_access_log(
            db,
            teacher_id=teacher.id,
            accessed_by=admin.id,
            access_type=AccessType.EXPORT,
            ip_address=ip_address,
        )

    await db.commit()

    logger.info(f"Admin {admin.id} exported bank details of {len(teachers)} teachers")
    return export
