"""
Bank Details Repository

Database operations for teacher profiles and the bank details access log.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AccessType, BankDetailsAccessLog, TeacherProfile


async def get_profile(db: AsyncSession, teacher_id: int) -> TeacherProfile | None:
    result = await db.execute(select(TeacherProfile).where(TeacherProfile.teacher_id == teacher_id))
    return result.scalar_one_or_none()


async def get_profiles(db: AsyncSession, teacher_ids: list[int]) -> dict[int, TeacherProfile]:
    """Profiles of several teachers, keyed by teacher id."""
    if not teacher_ids:
        return {}
    result = await db.execute(
        select(TeacherProfile).where(TeacherProfile.teacher_id.in_(teacher_ids))
    )
    return {profile.teacher_id: profile for profile in result.scalars().all()}


async def upsert_profile(db: AsyncSession, teacher_id: int, **values) -> TeacherProfile:
    """Create the teacher's profile or update the given columns, then commit."""
    profile = await get_profile(db, teacher_id)

    if profile is None:
        profile = TeacherProfile(teacher_id=teacher_id, **values)
        db.add(profile)
    else:
        for column, value in values.items():
            setattr(profile, column, value)

    await db.commit()
    await db.refresh(profile)
    return profile


def add_access_log(
    db: AsyncSession,
    *,
    teacher_id: int,
    accessed_by: int,
    access_type: AccessType,
    ip_address: str | None,
) -> None:
    """Stage an access log row; the caller commits."""
    db.add(
        BankDetailsAccessLog(
            teacher_id=teacher_id,
            accessed_by=accessed_by,
            access_type=access_type,
            ip_address=ip_address,
        )
    )
