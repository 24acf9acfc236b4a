"""Pet endpoints."""

from uuid import UUID

from fastapi import APIRouter, Response, status

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.pets import PetCreate, PetResponse, PetUpdate
from app.services.pet_service import PetService

router = APIRouter(prefix="/pets", tags=["Pets"])


@router.post("/", response_model=PetResponse, status_code=status.HTTP_201_CREATED)
async def add_pet(
    data: PetCreate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> PetResponse:
    """Register a pet owned by the caller."""
    return await PetService(db).add_pet(current_user.id, data)


@router.get("/", response_model=list[PetResponse])
async def list_pets(current_user: CurrentUser, db: DatabaseSession) -> list[PetResponse]:
    """List the caller's pets."""
    return await PetService(db).list_pets(current_user.id)


@router.get("/{pet_id}", response_model=PetResponse)
async def get_pet(pet_id: UUID, current_user: CurrentUser, db: DatabaseSession) -> PetResponse:
    """Get one of the caller's pets."""
    return await PetService(db).get_owned_pet(pet_id, current_user.id)


@router.put("/{pet_id}", response_model=PetResponse)
async def update_pet(
    pet_id: UUID,
    data: PetUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> PetResponse:
    """Update one of the caller's pets."""
    return await PetService(db).update_pet(pet_id, current_user.id, data)


@router.delete("/{pet_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pet(pet_id: UUID, current_user: CurrentUser, db: DatabaseSession) -> Response:
    """Delete one of the caller's pets that has no appointment history."""
    await PetService(db).delete_pet(pet_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
