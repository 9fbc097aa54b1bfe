from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from vmdash.models.vm import VMStatus


@dataclass
class VMRecord:
    id: str
    name: str
    region: str
    status: VMStatus
    cpu: int
    memory: int
    storage: int
    ip_address: str
    created_at: datetime
    updated_at: datetime


class VMDatastoreBase(ABC):
    """Persistence interface for the ``vms`` collection.

    Implementations raise ``DatastoreError`` on infrastructure failures and
    return ``None``/``False`` for a missing id; mapping a miss to a 404 is
    the service layer's job.
    """

    @abstractmethod
    async def list_vms(self) -> list[VMRecord]: ...

    @abstractmethod
    async def create_vm(
        self,
        name: str,
        region: str,
        status: VMStatus,
        cpu: int,
        memory: int,
        storage: int,
        ip_address: str,
    ) -> VMRecord: ...

    @abstractmethod
    async def update_vm(
        self,
        vm_id: str,
        status: VMStatus,
        cpu: int,
        memory: int,
        storage: int,
    ) -> VMRecord | None: ...

    @abstractmethod
    async def delete_vm(self, vm_id: str) -> bool: ...
