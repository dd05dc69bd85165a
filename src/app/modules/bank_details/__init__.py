"""Bank details module - encrypted teacher IBAN/BIC storage with audited access."""

from app.modules.bank_details.models import AccessType, BankDetailsAccessLog, TeacherProfile
from app.modules.bank_details.router import router

__all__ = ["router", "AccessType", "BankDetailsAccessLog", "TeacherProfile"]
