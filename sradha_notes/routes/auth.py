"""
Login, token verification and logout
"""
import logging

from fastapi import APIRouter, Depends

from .. import auth
from ..errors import AuthError
from ..models import LoginRequest
from ..responses import ok

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login")
async def login(payload: LoginRequest):
    """Exchange the fixed credentials for a 30-day bearer token"""
    try:
        session = auth.login(payload.username, payload.password)
    except AuthError:
        logger.warning("Failed login attempt")
        raise
    return ok(session, message="Welcome back, beautiful! 💕")


@router.get("/verify")
async def verify(user: dict = Depends(auth.get_current_user)):
    return ok({"user": user}, message="Token is valid! ✨")


@router.post("/logout")
async def logout():
    """
    Stateless: the token stays valid until it expires
    """
    return ok(message="Logged out successfully! See you soon 💕")
