"""
Bank Details Models

Teacher bank details are stored encrypted (AES-256-GCM, see
app.core.crypto). Every administrator read of decrypted details leaves a row
in bank_details_access_log.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.modules.shared import BaseModel


class AccessType(str, Enum):
    VIEW = "view"
    EXPORT = "export"


class TeacherProfile(BaseModel):
    """Per-teacher profile holding the encrypted IBAN and BIC."""

    __tablename__ = "teacher_profiles"

    teacher_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        index=True,
        nullable=False,
    )

    # iv:tag:ciphertext hex
    iban_encrypted: Mapped[str | None] = mapped_column(Text, nullable=True)
    bic_encrypted: Mapped[str | None] = mapped_column(Text, nullable=True)
    account_holder: Mapped[str | None] = mapped_column(String(200), nullable=True)

    bank_details_updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    bank_details_updated_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<TeacherProfile(id={self.id}, teacher_id={self.teacher_id})>"


class BankDetailsAccessLog(Base):
    """Audit trail of administrator access to decrypted bank details."""

    __tablename__ = "bank_details_access_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    accessed_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    access_type: Mapped[AccessType] = mapped_column(
        SAEnum(AccessType, name="bank_access_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    accessed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
