"""
Module 05 - Issuer Routes

Read-only view of the issuer trust registry.
"""

from fastapi import APIRouter, Depends

from api.deps import get_issuer_registry
from api.models.responses import IssuersResponse
from core.issuers.registry import IssuerRegistry


router = APIRouter(tags=["issuers"])


@router.get("/issuers", response_model=IssuersResponse)
async def list_issuers(
    registry: IssuerRegistry = Depends(get_issuer_registry),
) -> IssuersResponse:
    return IssuersResponse(issuers=registry.all())
