from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ....application.services.contact_service import ContactService
from ....core.dependencies import get_contact_service
from ....domain.models import TokenClaims
from ...api.dependencies import require_user
from ...api.schemas.contact_schemas import (
    ContactCreatePayload,
    ContactResponse,
    ContactUpdatePayload,
)
from ...api.schemas.user_schemas import MessageResponse

router = APIRouter(prefix="/api/contacts", tags=["Contacts"])


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    payload: ContactCreatePayload,
    claims: TokenClaims = Depends(require_user),
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    contact = service.create_contact(claims.user_id, payload.to_fields())
    return ContactResponse.from_contact(contact)


@router.get("", response_model=List[ContactResponse])
async def list_contacts(
    claims: TokenClaims = Depends(require_user),
    service: ContactService = Depends(get_contact_service),
) -> List[ContactResponse]:
    return [ContactResponse.from_contact(item) for item in service.list_contacts(claims.user_id)]


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: int,
    claims: TokenClaims = Depends(require_user),
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    return ContactResponse.from_contact(service.get_contact(claims.user_id, contact_id))


@router.put("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: int,
    payload: ContactUpdatePayload,
    claims: TokenClaims = Depends(require_user),
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    contact = service.update_contact(claims.user_id, contact_id, payload.to_fields())
    return ContactResponse.from_contact(contact)


@router.delete("/{contact_id}", response_model=MessageResponse)
async def delete_contact(
    contact_id: int,
    claims: TokenClaims = Depends(require_user),
    service: ContactService = Depends(get_contact_service),
) -> MessageResponse:
    service.delete_contact(claims.user_id, contact_id)
    return MessageResponse(message="Contact deleted successfully")
