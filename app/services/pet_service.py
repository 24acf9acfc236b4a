"""Pet records, scoped to their owner."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictException, NotFoundException, UnauthorizedException
from app.models.pets import pets
from app.schemas.pets import PetCreate, PetResponse, PetUpdate


class PetService:
    """Service for managing pets."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def add_pet(self, owner_id: UUID, data: PetCreate) -> PetResponse:
        """Register a pet for the caller."""
        stmt = pets.insert().values(owner_id=owner_id, **data.model_dump()).returning(pets)
        result = await self.db.execute(stmt)
        await self.db.commit()
        return PetResponse.model_validate(dict(result.mappings().one()))

    async def get_pet(self, pet_id: UUID) -> PetResponse | None:
        """Look up a pet regardless of owner."""
        result = await self.db.execute(select(pets).where(pets.c.id == pet_id))
        row = result.mappings().first()
        return PetResponse.model_validate(dict(row)) if row else None

    async def get_owned_pet(self, pet_id: UUID, owner_id: UUID) -> PetResponse:
        """
        Get a pet the caller owns.

        Raises:
            NotFoundException: If the pet does not exist
            UnauthorizedException: If the caller does not own the pet
        """
        pet = await self.get_pet(pet_id)
        if pet is None:
            raise NotFoundException("Pet not found")
        if pet.owner_id != owner_id:
            raise UnauthorizedException("You do not own this pet")
        return pet

    async def list_pets(self, owner_id: UUID) -> list[PetResponse]:
        """List the caller's pets."""
        result = await self.db.execute(
            select(pets).where(pets.c.owner_id == owner_id).order_by(pets.c.created_at, pets.c.name)
        )
        return [PetResponse.model_validate(dict(row)) for row in result.mappings()]

    async def update_pet(self, pet_id: UUID, owner_id: UUID, data: PetUpdate) -> PetResponse:
        """Update a pet the caller owns."""
        pet = await self.get_owned_pet(pet_id, owner_id)

        update_values = data.model_dump(exclude_unset=True)
        if not update_values:
            return pet

        update_values["updated_at"] = datetime.now(UTC)
        result = await self.db.execute(
            update(pets).where(pets.c.id == pet_id).values(**update_values).returning(pets)
        )
        await self.db.commit()
        return PetResponse.model_validate(dict(result.mappings().one()))

    async def delete_pet(self, pet_id: UUID, owner_id: UUID) -> None:
        """
        Delete a pet the caller owns.

        Raises:
            ConflictException: If appointments still reference the pet
        """
        await self.get_owned_pet(pet_id, owner_id)
        try:
            await self.db.execute(delete(pets).where(pets.c.id == pet_id))
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Pet has appointment history and cannot be deleted")
