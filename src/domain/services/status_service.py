"""Profile status service layer with business logic."""

from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

import structlog
from pydantic import ValidationError

from core.exceptions import StatusInUseError, StatusNotFoundError, StoreUnavailableError
from domain.entities.profile_status import DEFAULT_STATUSES, ProfileStatus
from domain.repositories.unit_of_work import IUnitOfWork
from domain.schemas.errors import invalid_data
from domain.schemas.profile_status import StatusCreate, StatusUpdate

logger = structlog.get_logger()


class StatusService:
    """Service layer for ProfileStatus business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def list_statuses(self) -> list[ProfileStatus]:
        """Get all statuses ordered by name."""
        async with self._uow_factory() as uow:
            return await uow.statuses.get_all()

    async def get_status(self, status_id: str) -> ProfileStatus | None:
        """Get a status by ID; None when it does not exist."""
        async with self._uow_factory() as uow:
            return await uow.statuses.get(status_id)

    async def create_status(self, data: Mapping[str, Any] | StatusCreate) -> ProfileStatus:
        """Validate and store a new status."""
        if not isinstance(data, StatusCreate):
            try:
                data = StatusCreate.model_validate(dict(data))
            except ValidationError as exc:
                raise invalid_data(exc) from exc

        async with self._uow_factory() as uow:
            created = await uow.statuses.create(
                ProfileStatus(name=data.name, description=data.description or None)
            )
            await uow.commit()

        logger.info("status_created", status_id=created.id, name=created.name)
        return created

    async def update_status(
        self, status_id: str, data: Mapping[str, Any] | StatusUpdate
    ) -> ProfileStatus | None:
        """Update a status. Returns None when it does not exist."""
        if not isinstance(data, StatusUpdate):
            try:
                data = StatusUpdate.model_validate(dict(data))
            except ValidationError as exc:
                raise invalid_data(exc) from exc
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is None:
            changes.pop("name", None)
        if "description" in changes:
            changes["description"] = changes["description"] or None

        async with self._uow_factory() as uow:
            status = await uow.statuses.get(status_id)
            if not status:
                logger.warning("status_update_missing", status_id=status_id)
                return None

            updated = await uow.statuses.update(replace(status, **changes))
            await uow.commit()

        logger.info("status_updated", status_id=status_id, fields=sorted(changes))
        return updated

    async def delete_status(self, status_id: str, *, strict: bool = False) -> bool:
        """Delete a status that no profile references.

        Any referencing profile (one is enough) refuses the delete without
        attempting it. The check and a conditional delete share a single
        transaction; a profile assigned concurrently on another connection can
        still slip between them on stores without serializable isolation.

        Returns False when refused or failed. With ``strict`` the failure is
        raised instead (StatusInUseError, StatusNotFoundError or
        StoreUnavailableError).
        """
        try:
            async with self._uow_factory() as uow:
                in_use_by = await uow.profiles.find_id_by_status(status_id)
                if in_use_by is not None:
                    logger.warning(
                        "status_delete_refused",
                        status_id=status_id,
                        profile_id=in_use_by,
                    )
                    if strict:
                        raise StatusInUseError(status_id, in_use_by)
                    return False

                deleted = await uow.statuses.delete_if_unreferenced(status_id)
                if not deleted:
                    # Either missing, or referenced between the check and the delete.
                    in_use_by = await uow.profiles.find_id_by_status(status_id)
                await uow.commit()
        except StoreUnavailableError:
            logger.error("status_delete_failed", status_id=status_id, exc_info=True)
            if strict:
                raise
            return False

        if not deleted:
            if strict:
                if in_use_by is not None:
                    raise StatusInUseError(status_id, in_use_by)
                raise StatusNotFoundError(status_id)
            logger.warning("status_delete_missing", status_id=status_id)
            return False

        logger.info("status_deleted", status_id=status_id)
        return True

    async def seed_default_statuses(self) -> int:
        """Insert the well-known statuses into an empty store.

        Returns the number of statuses inserted (0 when any already exist).
        """
        async with self._uow_factory() as uow:
            if await uow.statuses.any_exists():
                return 0
            created = await uow.statuses.create_many(
                [replace(status) for status in DEFAULT_STATUSES]
            )
            await uow.commit()

        logger.info("default_statuses_seeded", count=len(created))
        return len(created)
