from typing import Annotated

from fastapi import APIRouter, Depends, status

from vmdash.dependencies import get_vm_service
from vmdash.infra.datastore.base import VMRecord
from vmdash.schemas.vm import DeleteResponse, VMCreate, VMResponse, VMUpdate
from vmdash.services.vm_service import VMService

router = APIRouter(prefix="/vms", tags=["vms"])


def _to_response(record: VMRecord) -> VMResponse:
    return VMResponse(
        id=record.id,
        name=record.name,
        region=record.region,
        status=record.status,
        cpu=record.cpu,
        memory=record.memory,
        storage=record.storage,
        ip_address=record.ip_address,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


@router.get(
    "",
    response_model=list[VMResponse],
    summary="List all VMs, newest first",
)
async def list_vms(
    service: Annotated[VMService, Depends(get_vm_service)],
) -> list[VMResponse]:
    records = await service.list()
    return [_to_response(r) for r in records]


@router.post(
    "",
    response_model=VMResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a VM record",
)
async def create_vm(
    payload: VMCreate,
    service: Annotated[VMService, Depends(get_vm_service)],
) -> VMResponse:
    record = await service.create(payload)
    return _to_response(record)


@router.put(
    "/{vm_id}",
    response_model=VMResponse,
    summary="Update VM status and resource usage",
)
async def update_vm(
    vm_id: str,
    payload: VMUpdate,
    service: Annotated[VMService, Depends(get_vm_service)],
) -> VMResponse:
    record = await service.update(vm_id, payload)
    return _to_response(record)


@router.delete(
    "/{vm_id}",
    response_model=DeleteResponse,
    summary="Delete a VM record",
)
async def delete_vm(
    vm_id: str,
    service: Annotated[VMService, Depends(get_vm_service)],
) -> DeleteResponse:
    await service.delete(vm_id)
    return DeleteResponse()
