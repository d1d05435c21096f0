"""Routes issuing Inworld JWT tokens to front-end clients."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from inworld_token.models.token import TokenResponse
from inworld_token.services.token_service import (
    TokenRequestError,
    TokenService,
    get_token_service,
)
from inworld_token.utils.inworld_signer import SignerInputError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _get_token_service() -> TokenService:
    try:
        return get_token_service()
    except RuntimeError as exc:
        raise HTTPException(status_code=503, detail="Token service is not configured") from exc


@router.post("/token", response_model=TokenResponse, response_model_exclude_unset=True)
async def generate_token(
    service: TokenService = Depends(_get_token_service),
) -> TokenResponse:
    """Generate a fresh JWT token for the configured workspace."""
    try:
        token = await service.generate_token()
    except TokenRequestError as exc:
        raise HTTPException(
            status_code=502,
            detail={
                "message": "Inworld token request failed",
                "upstream_status": exc.status_code,
                "upstream_body": exc.body,
            },
        ) from exc
    except SignerInputError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    logger.info(f"Token issued: type={token.type}, expires={token.expirationTime}")
    return token
