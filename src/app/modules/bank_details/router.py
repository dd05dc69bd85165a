"""
Bank Details Router

Endpoints:
- GET /bank-details - Teacher: own decrypted bank details
- PUT /bank-details - Teacher: update own bank details
- GET /bank-details/teachers - Admin: export every teacher's bank details
- GET /bank-details/teachers/{teacher_id} - Admin: one teacher's bank details
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser, get_current_admin, get_current_teacher
from app.core.database import get_db
from app.core.exceptions import AppError
from app.modules.bank_details import service
from app.modules.bank_details.schemas import (
    BankDetails,
    BankDetailsUpdate,
    BankDetailsUpdateResponse,
    TeacherBankDetails,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _http_error(e: AppError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


@router.get("", response_model=BankDetails)
async def get_own_bank_details(
    teacher: AuthenticatedUser = Depends(get_current_teacher),
    db: AsyncSession = Depends(get_db),
) -> BankDetails:
    try:
        return await service.get_own_bank_details(db, teacher)
    except AppError as e:
        raise _http_error(e) from e


@router.put("", response_model=BankDetailsUpdateResponse)
async def update_bank_details(
    data: BankDetailsUpdate,
    teacher: AuthenticatedUser = Depends(get_current_teacher),
    db: AsyncSession = Depends(get_db),
) -> BankDetailsUpdateResponse:
    try:
        return await service.update_bank_details(db, teacher, data)
    except AppError as e:
        raise _http_error(e) from e


@router.get("/teachers", response_model=list[TeacherBankDetails])
async def export_bank_details(
    request: Request,
    admin: AuthenticatedUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> list[TeacherBankDetails]:
    try:
        return await service.export_all_bank_details(db, admin, _client_ip(request))
    except AppError as e:
        raise _http_error(e) from e


@router.get("/teachers/{teacher_id}", response_model=TeacherBankDetails)
async def get_teacher_bank_details(
    teacher_id: int,
    request: Request,
    admin: AuthenticatedUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> TeacherBankDetails:
    try:
        return await service.get_teacher_bank_details(db, admin, teacher_id, _client_ip(request))
    except AppError as e:
        raise _http_error(e) from e
