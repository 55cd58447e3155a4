from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from app.core.auth import token_service
from app.models.auth import TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/token", response_model=TokenResponse)
async def get_token(username: str, password: str):
    if not token_service.check_credentials(username, password):
        logger.warning("Rejected token request for user=%s", username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    return TokenResponse(
        access_token=token_service.issue_token(username),
        expires_in=token_service.expire_seconds,
    )
