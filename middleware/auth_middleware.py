import logging
from typing import Optional
from fastapi import Request, HTTPException

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Routes that never need an identity
PUBLIC_ROUTES = ("/", "/health")


def extract_user_id(auth_header: Optional[str]) -> Optional[str]:
    """
    Pull the user id out of an Authorization header.
    The identity provider in front of this service forwards "Bearer <userId>".
    """
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


async def get_current_user_id(request: Request) -> Optional[str]:
    """
    Resolve the current user for read routes.
    Missing identity is not an error: callers get None and degrade to no data.
    """
    if request.url.path in PUBLIC_ROUTES:
        return None
    return extract_user_id(request.headers.get("Authorization"))


async def require_user_id(request: Request) -> str:
    """Resolve the current user for mutations, rejecting anonymous requests"""
    user_id = await get_current_user_id(request)
    if not user_id:
        logger.info(f"Rejected anonymous request to {request.url.path}")
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id
