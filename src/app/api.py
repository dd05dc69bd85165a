from fastapi import APIRouter

from app.modules.auth import router as auth_router
from app.modules.bank_details import router as bank_details_router
from app.modules.notifications.router import router as notifications_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(
    notifications_router, prefix="/notifications", tags=["Notifications"]
)

api_router.include_router(
    bank_details_router, prefix="/bank-details", tags=["Bank Details"]
)
