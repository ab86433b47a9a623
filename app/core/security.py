"""Security and authentication utilities."""
import secrets
from fastapi import Security, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.config import ADMIN_API_KEY

security_scheme = HTTPBearer(auto_error=False)


def verify_admin_key(credentials: HTTPAuthorizationCredentials = Security(security_scheme)):
    """Guards the cache administration endpoints with the admin Bearer token."""
    if credentials is None or not secrets.compare_digest(credentials.credentials.encode(), ADMIN_API_KEY.encode()):
        raise HTTPException(
            status_code=403,
            detail="Invalid or missing API Key for cache administration."
        )
    return True
