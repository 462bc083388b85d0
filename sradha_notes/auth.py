"""
Authentication for the single Sradha's Notes account
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from . import config
from .errors import AuthError

security = HTTPBearer(auto_error=False)

# bcrypt ignores everything past 72 bytes, newer releases refuse it outright
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(password: str, hashed: str) -> bool:
    encoded = password.encode('utf-8')
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed.encode('utf-8'))


_PASSWORD_HASH = hash_password(config.VALID_PASSWORD)


def current_user() -> Dict[str, str]:
    return {"username": config.VALID_USERNAME, "name": config.DISPLAY_NAME}


def create_access_token(username: str, name: str, ttl: Optional[timedelta] = None) -> str:
    payload = {
        'username': username,
        'name': name,
        'exp': datetime.now(timezone.utc) + (ttl or timedelta(days=config.TOKEN_TTL_DAYS)),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, str]:
    """
    Check signature and expiry; any problem becomes the same generic AuthError
    """
    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["exp", "username"]},
        )
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token 🔐")
    return {"username": payload["username"], "name": payload.get("name")}


def login(username: str, password: str) -> Dict[str, object]:
    """
    Username is case-insensitive, password is not. Failures never say which was wrong.
    """
    if (username or "").lower() != config.VALID_USERNAME or not verify_password(password or "", _PASSWORD_HASH):
        raise AuthError("Oops! Wrong credentials, my love 💔")
    user = current_user()
    return {"token": create_access_token(user["username"], user["name"]), "user": user}


async def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Dict[str, str]:
    """
    Extract the user from the bearer token
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("No token provided 🔐")
    return decode_token(credentials.credentials)


async def require_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Optional[Dict[str, str]]:
    """
    Gate for content routes; a no-op when AUTH_REQUIRED is off
    """
    if not config.AUTH_REQUIRED:
        return None
    return await get_current_user(credentials)
