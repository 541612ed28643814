from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ....application.services.interaction_service import InteractionService
from ....core.dependencies import get_interaction_service
from ....domain.models import TokenClaims
from ...api.dependencies import require_user
from ...api.schemas.interaction_schemas import (
    InteractionCreatePayload,
    InteractionResponse,
    InteractionUpdatePayload,
)
from ...api.schemas.user_schemas import MessageResponse

router = APIRouter(prefix="/api/interactions", tags=["Interactions"])


@router.get("", response_model=List[InteractionResponse])
async def list_all_interactions(
    service: InteractionService = Depends(get_interaction_service),
) -> List[InteractionResponse]:
    """Dashboard feed of every interaction, soonest first. Not authenticated."""
    return [InteractionResponse.from_interaction(item) for item in service.list_all()]


@router.post("", response_model=InteractionResponse, status_code=status.HTTP_201_CREATED)
async def create_interaction(
    payload: InteractionCreatePayload,
    claims: TokenClaims = Depends(require_user),
    service: InteractionService = Depends(get_interaction_service),
) -> InteractionResponse:
    interaction = service.create_interaction(claims.user_id, payload.contact_id, payload.to_fields())
    return InteractionResponse.from_interaction(interaction)


@router.get("/{contact_id}", response_model=List[InteractionResponse])
async def list_contact_interactions(
    contact_id: int,
    claims: TokenClaims = Depends(require_user),
    service: InteractionService = Depends(get_interaction_service),
) -> List[InteractionResponse]:
    items = service.list_for_contact(claims.user_id, contact_id)
    return [InteractionResponse.from_interaction(item) for item in items]


@router.put("/{interaction_id}", response_model=InteractionResponse)
async def update_interaction(
    interaction_id: int,
    payload: InteractionUpdatePayload,
    claims: TokenClaims = Depends(require_user),
    service: InteractionService = Depends(get_interaction_service),
) -> InteractionResponse:
    interaction = service.update_interaction(claims.user_id, interaction_id, payload.to_fields())
    return InteractionResponse.from_interaction(interaction)


@router.delete("/{interaction_id}", response_model=MessageResponse)
async def delete_interaction(
    interaction_id: int,
    claims: TokenClaims = Depends(require_user),
    service: InteractionService = Depends(get_interaction_service),
) -> MessageResponse:
    service.delete_interaction(claims.user_id, interaction_id)
    return MessageResponse(message="Interaction deleted successfully")
