"""SQLAlchemy implementation of Profile repository."""

from typing import Any

import structlog
from pydantic import ValidationError
from sqlalchemy import ColumnElement, Select, func, literal, select, tuple_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from core.exceptions import CursorExpiredError
from domain.entities.profile import Profile
from domain.entities.query import FieldFilter, FilterOp, ProfileScan, QueryPlan
from domain.schemas.profile import ProfileRecord
from infrastructure.database.models import ProfileModel

logger = structlog.get_logger()

# Fields a query plan may filter or order on.
QUERYABLE: dict[str, InstrumentedAttribute[Any]] = {
    "id": ProfileModel.id,
    "name": ProfileModel.name,
    "age": ProfileModel.age,
    "star_match_score": ProfileModel.star_match_score,
    "city": ProfileModel.city,
    "status_id": ProfileModel.status_id,
    "created_at": ProfileModel.created_at,
    "updated_at": ProfileModel.updated_at,
}


def _column(field: str) -> InstrumentedAttribute[Any]:
    try:
        return QUERYABLE[field]
    except KeyError:
        raise ValueError(f"Profiles cannot be queried by {field!r}") from None


def _condition(f: FieldFilter) -> ColumnElement[bool]:
    column = _column(f.field)
    if f.op is FilterOp.EQ:
        return column == f.value
    if f.op is FilterOp.NE:
        return column != f.value
    if f.op is FilterOp.GTE:
        return column >= f.value
    return column < f.value


def _filtered(stmt: Select[Any], plan: QueryPlan) -> Select[Any]:
    for f in plan.filters:
        stmt = stmt.where(_condition(f))
    return stmt


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: str) -> Profile | None:
        """Get a profile by ID."""
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_after(
        self, plan: QueryPlan, limit: int, start_after: str | None = None
    ) -> ProfileScan:
        """Scan up to ``limit`` profiles in plan order, after a cursor profile."""
        order_columns = [_column(name) for name in plan.order_by]
        stmt = _filtered(select(ProfileModel), plan)

        if start_after is not None:
            bound = await self._order_values(order_columns, start_after)
            if bound is None:
                raise CursorExpiredError(start_after)
            stmt = stmt.where(tuple_(*order_columns) > tuple_(*bound))

        stmt = stmt.order_by(*order_columns).limit(limit)
        result = await self._session.execute(stmt)
        models = list(result.scalars())
        return ProfileScan(
            items=self._to_entities(models),
            scanned=len(models),
            last_id=models[-1].id if models else None,
        )

    async def position_of(self, plan: QueryPlan, id: str) -> int | None:
        """Count the matches ordered at or before a profile; None if it is gone."""
        order_columns = [_column(name) for name in plan.order_by]
        bound = await self._order_values(order_columns, id)
        if bound is None:
            return None
        stmt = _filtered(select(func.count()).select_from(ProfileModel), plan).where(
            tuple_(*order_columns) <= tuple_(*bound)
        )
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def _order_values(
        self, order_columns: list[InstrumentedAttribute[Any]], id: str
    ) -> list[ColumnElement[Any]] | None:
        """Read a profile's ordering values as bound literals."""
        stmt = select(*order_columns).where(ProfileModel.id == id)
        row = (await self._session.execute(stmt)).one_or_none()
        if row is None:
            return None
        return [literal(v, type_=c.type) for c, v in zip(order_columns, row)]

    async def cursor_at(self, plan: QueryPlan, position: int) -> str | None:
        """Walk past the first ``position`` matches and return the last id seen."""
        if position <= 0:
            return None
        order_columns = [_column(name) for name in plan.order_by]
        stmt = (
            _filtered(select(ProfileModel.id), plan)
            .order_by(*order_columns)
            .limit(position)
        )
        result = await self._session.execute(stmt)
        ids = list(result.scalars())
        if len(ids) < position:
            return None
        return ids[-1]

    async def count(self, plan: QueryPlan) -> int:
        """Count stored profiles matching the plan's filters, corrupt ones included."""
        stmt = _filtered(select(func.count()).select_from(ProfileModel), plan)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def find_id_by_status(self, status_id: str) -> str | None:
        """Get the id of one profile referencing a status, if any."""
        stmt = select(ProfileModel.id).where(ProfileModel.status_id == status_id).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._entity_or_raise(model)

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile."""
        stmt = select(ProfileModel).where(ProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Profile {profile.id} not found")

        for name, value in profile.user_data().items():
            setattr(model, name, value)
        model.updated_at = profile.updated_at

        await self._session.flush()
        return self._entity_or_raise(model)

    async def delete(self, id: str) -> bool:
        """Delete a profile."""
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entities(self, models: Any) -> list[Profile]:
        profiles = []
        for model in models:
            entity = self._to_entity(model)
            if entity is not None:
                profiles.append(entity)
        return profiles

    def _to_entity(self, model: ProfileModel) -> Profile | None:
        """Validate a stored row and convert it; corrupt rows are dropped."""
        try:
            record = ProfileRecord.model_validate(model)
        except ValidationError as exc:
            logger.warning(
                "profile_record_dropped",
                profile_id=model.id,
                errors=[".".join(str(p) for p in e["loc"]) for e in exc.errors()],
            )
            return None
        return Profile(**record.model_dump())

    def _entity_or_raise(self, model: ProfileModel) -> Profile:
        entity = self._to_entity(model)
        if entity is None:
            raise ValueError(f"Profile {model.id} failed validation after write")
        return entity

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        model = ProfileModel(
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            **entity.user_data(),
        )
        if entity.id:
            model.id = entity.id
        return model
