from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vmdash.db.session import get_db
from vmdash.infra.datastore.base import VMDatastoreBase
from vmdash.infra.datastore.sql_datastore import SqlVMDatastore
from vmdash.services.vm_service import VMService


async def get_datastore(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> VMDatastoreBase:
    return SqlVMDatastore(session)


async def get_vm_service(
    datastore: Annotated[VMDatastoreBase, Depends(get_datastore)],
) -> VMService:
    return VMService(datastore)
