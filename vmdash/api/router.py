from fastapi import APIRouter

from vmdash.api.endpoints import debug, vms

router = APIRouter()

router.include_router(vms.router)
router.include_router(debug.router)
