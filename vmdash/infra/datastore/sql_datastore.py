"""
SqlVMDatastore: VMDatastoreBase over an async SQLAlchemy session.

Works against any SQLAlchemy async driver (asyncpg in production, aiosqlite
in tests). Every mutation commits before returning.
"""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vmdash.core.exceptions import DatastoreError
from vmdash.infra.datastore.base import VMDatastoreBase, VMRecord
from vmdash.models.vm import VirtualMachine, VMStatus, utcnow

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _vm_to_record(vm: VirtualMachine) -> VMRecord:
    return VMRecord(
        id=vm.id,
        name=vm.name,
        region=vm.region,
        status=vm.status,
        cpu=vm.cpu,
        memory=vm.memory,
        storage=vm.storage,
        ip_address=vm.ip_address,
        created_at=_as_utc(vm.created_at),
        updated_at=_as_utc(vm.updated_at),
    )


def _next_updated_at(previous: datetime) -> datetime:
    """Return a timestamp strictly after ``previous``."""
    now = utcnow()
    previous = _as_utc(previous)
    if now <= previous:
        now = previous + timedelta(microseconds=1)
    return now


class SqlVMDatastore(VMDatastoreBase):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _rollback_after(self, operation: str, exc: SQLAlchemyError) -> None:
        logger.error(
            "Datastore operation failed",
            extra={"operation": operation, "exc_type": type(exc).__name__},
        )
        try:
            await self._session.rollback()
        except SQLAlchemyError:
            logger.warning("Rollback after failure also failed", extra={"operation": operation})

    async def list_vms(self) -> list[VMRecord]:
        try:
            result = await self._session.execute(
                select(VirtualMachine).order_by(VirtualMachine.created_at.desc())
            )
        except SQLAlchemyError as exc:
            await self._rollback_after("fetch VMs", exc)
            raise DatastoreError("fetch VMs", str(exc)) from exc
        return [_vm_to_record(vm) for vm in result.scalars().all()]

    async def create_vm(
        self,
        name: str,
        region: str,
        status: VMStatus,
        cpu: int,
        memory: int,
        storage: int,
        ip_address: str,
    ) -> VMRecord:
        now = utcnow()
        vm = VirtualMachine(
            name=name,
            region=region,
            status=status,
            cpu=cpu,
            memory=memory,
            storage=storage,
            ip_address=ip_address,
            created_at=now,
            updated_at=now,
        )
        try:
            self._session.add(vm)
            await self._session.commit()
            await self._session.refresh(vm)
        except SQLAlchemyError as exc:
            await self._rollback_after("create VM", exc)
            raise DatastoreError("create VM", str(exc)) from exc
        return _vm_to_record(vm)

    async def _get(self, vm_id: str) -> VirtualMachine | None:
        result = await self._session.execute(
            select(VirtualMachine).where(VirtualMachine.id == vm_id)
        )
        return result.scalar_one_or_none()

    async def update_vm(
        self,
        vm_id: str,
        status: VMStatus,
        cpu: int,
        memory: int,
        storage: int,
    ) -> VMRecord | None:
        try:
            vm = await self._get(vm_id)
            if vm is None:
                return None
            vm.status = status
            vm.cpu = cpu
            vm.memory = memory
            vm.storage = storage
            vm.updated_at = _next_updated_at(vm.updated_at)
            await self._session.commit()
            await self._session.refresh(vm)
        except SQLAlchemyError as exc:
            await self._rollback_after("update VM", exc)
            raise DatastoreError("update VM", str(exc)) from exc
        return _vm_to_record(vm)

    async def delete_vm(self, vm_id: str) -> bool:
        try:
            vm = await self._get(vm_id)
            if vm is None:
                return False
            await self._session.delete(vm)
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._rollback_after("delete VM", exc)
            raise DatastoreError("delete VM", str(exc)) from exc
        return True
