"""
VM service: request validation and orchestration over the datastore.

The only rule enforced here is required-field presence; everything else is
passed through to the datastore unchanged.
"""

import logging

from vmdash.core.exceptions import MissingFieldsError, VMNotFoundError
from vmdash.infra.datastore.base import VMDatastoreBase, VMRecord
from vmdash.schemas.vm import (
    REQUIRED_CREATE_FIELDS,
    REQUIRED_UPDATE_FIELDS,
    VMCreate,
    VMUpdate,
    missing_fields,
)

logger = logging.getLogger(__name__)


class VMService:
    def __init__(self, datastore: VMDatastoreBase) -> None:
        self._datastore = datastore

    async def list(self) -> list[VMRecord]:
        records = await self._datastore.list_vms()
        logger.debug("VMs listed", extra={"count": len(records)})
        return records

    async def create(self, payload: VMCreate) -> VMRecord:
        missing = missing_fields(payload, REQUIRED_CREATE_FIELDS)
        if missing:
            raise MissingFieldsError(missing, REQUIRED_CREATE_FIELDS)

        record = await self._datastore.create_vm(
            name=payload.name,
            region=payload.region,
            status=payload.status,
            cpu=payload.cpu or 0,
            memory=payload.memory or 0,
            storage=payload.storage or 0,
            ip_address=payload.ip_address,
        )
        logger.info(
            "VM created",
            extra={
                "vm_id": record.id,
                "vm_name": record.name,
                "region": record.region,
                "status": record.status.value,
            },
        )
        return record

    async def update(self, vm_id: str, payload: VMUpdate) -> VMRecord:
        missing = missing_fields(payload, REQUIRED_UPDATE_FIELDS)
        if missing:
            raise MissingFieldsError(missing, REQUIRED_UPDATE_FIELDS)
        record = await self._datastore.update_vm(
            vm_id,
            status=payload.status,
            cpu=payload.cpu or 0,
            memory=payload.memory or 0,
            storage=payload.storage or 0,
        )
        if record is None:
            raise VMNotFoundError(vm_id)
        logger.info("VM updated", extra={"vm_id": vm_id, "status": record.status.value})
        return record

    async def delete(self, vm_id: str) -> None:
        deleted = await self._datastore.delete_vm(vm_id)
        if not deleted:
            raise VMNotFoundError(vm_id)
        logger.info("VM deleted", extra={"vm_id": vm_id})
