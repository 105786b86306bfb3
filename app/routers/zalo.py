"""
Zalo relay routes.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from ..models.auth import TokenExchangeRequest
from ..services.relay_service import RelayService
from ..models.responses import ErrorResponse

router = APIRouter(prefix="/api/zalo", tags=["zalo"])


def get_relay_service() -> RelayService:
    """Dependency to get relay service instance."""
    return RelayService()


@router.post("/token", responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def exchange_token(
    body: TokenExchangeRequest,
    relay_service: RelayService = Depends(get_relay_service)
) -> JSONResponse:
    """
    Exchange an authorization code and PKCE verifier for a Zalo access token.
    The provider's token response is returned as-is.
    """
    token_data = await relay_service.exchange_token(body)
    return JSONResponse(content=token_data)


@router.get(
    "/me",
    responses={
        401: {"model": ErrorResponse},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def me(
    authorization: Optional[str] = Header(default=None),
    relay_service: RelayService = Depends(get_relay_service)
) -> JSONResponse:
    """
    Fetch the Zalo profile for the bearer token in the Authorization header.
    """
    profile = await relay_service.fetch_profile(authorization)
    return JSONResponse(content=profile)
