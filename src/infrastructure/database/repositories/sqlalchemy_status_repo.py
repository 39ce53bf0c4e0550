"""SQLAlchemy implementation of ProfileStatus repository."""

from typing import Any

import structlog
from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile_status import ProfileStatus
from domain.schemas.profile_status import StatusRecord
from infrastructure.database.models import ProfileModel, ProfileStatusModel

logger = structlog.get_logger()


class SQLAlchemyStatusRepository:
    """SQLAlchemy implementation of IStatusRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: str) -> ProfileStatus | None:
        """Get a status by ID."""
        stmt = select(ProfileStatusModel).where(ProfileStatusModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self) -> list[ProfileStatus]:
        """Get all statuses ordered by name."""
        stmt = select(ProfileStatusModel).order_by(
            ProfileStatusModel.name, ProfileStatusModel.id
        )
        result = await self._session.execute(stmt)
        statuses = []
        for model in result.scalars():
            entity = self._to_entity(model)
            if entity is not None:
                statuses.append(entity)
        return statuses

    async def any_exists(self) -> bool:
        """Check whether at least one status is stored."""
        stmt = select(ProfileStatusModel.id).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create(self, status: ProfileStatus) -> ProfileStatus:
        """Create a new status."""
        model = self._to_model(status)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._entity_or_raise(model)

    async def create_many(self, statuses: list[ProfileStatus]) -> list[ProfileStatus]:
        """Create several statuses in one flush."""
        models = [self._to_model(status) for status in statuses]
        self._session.add_all(models)
        await self._session.flush()
        return [self._entity_or_raise(model) for model in models]

    async def update(self, status: ProfileStatus) -> ProfileStatus:
        """Update an existing status."""
        stmt = select(ProfileStatusModel).where(ProfileStatusModel.id == status.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Status {status.id} not found")

        model.name = status.name
        model.description = status.description

        await self._session.flush()
        return self._entity_or_raise(model)

    async def delete_if_unreferenced(self, id: str) -> bool:
        """Delete a status in one statement, only while no profile references it."""
        referenced = select(ProfileModel.id).where(ProfileModel.status_id == id).exists()
        stmt = (
            delete(ProfileStatusModel)
            .where(ProfileStatusModel.id == id, ~referenced)
            .execution_options(synchronize_session=False)
        )
        result: Any = await self._session.execute(stmt)
        return bool(result.rowcount)

    def _to_entity(self, model: ProfileStatusModel) -> ProfileStatus | None:
        """Validate a stored row and convert it; corrupt rows are dropped."""
        try:
            record = StatusRecord.model_validate(model)
        except ValidationError:
            logger.warning("status_record_dropped", status_id=model.id)
            return None
        return ProfileStatus(
            id=record.id,
            name=record.name,
            description=record.description,
        )

    def _entity_or_raise(self, model: ProfileStatusModel) -> ProfileStatus:
        entity = self._to_entity(model)
        if entity is None:
            raise ValueError(f"Status {model.id} failed validation after write")
        return entity

    def _to_model(self, entity: ProfileStatus) -> ProfileStatusModel:
        """Convert domain entity to ORM model."""
        model = ProfileStatusModel(name=entity.name, description=entity.description)
        if entity.id:
            model.id = entity.id
        return model
