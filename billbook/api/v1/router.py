"""API V1 Router"""

from fastapi import APIRouter

from billbook.api.v1.endpoints import auth, bills, participants, public

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(participants.router, prefix="/participants", tags=["Participants"])
api_router.include_router(bills.router, prefix="/bills", tags=["Bills"])
api_router.include_router(public.router, prefix="/public", tags=["Public Share"])
