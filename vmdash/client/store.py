"""
VMStore: the dashboard's in-process cache of VM records.

Mode machine (per store, never per record):

    LOADING --refresh ok--> LIVE
    LOADING --refresh fails--> FALLBACK   (cache = demo dataset)
    LIVE    --refresh fails--> FALLBACK
    FALLBACK --refresh ok--> LIVE         (manual retry only)

Mutation failures never change the mode. While in FALLBACK every mutation
is applied locally and no request is sent.

Policy per operation:
    update_status - optimistic; on failure the record is restored to its
                    exact pre-call value
    create/delete - pessimistic; the cache changes only after the API confirms

The cache is a tuple of frozen VMResponse values, replaced wholesale on each
change. Overlapping status updates of the same record are serialized with a
per-id lock so a late response cannot overwrite a newer optimistic write.
"""

import asyncio
import enum
import logging
import random
import uuid

from vmdash.client.api import VMApiClient, VMApiError
from vmdash.client.dashboard import build_clone_payload
from vmdash.config import Settings
from vmdash.demo_data import DEMO_VMS
from vmdash.models.vm import VMStatus, utcnow
from vmdash.schemas.vm import REQUIRED_CREATE_FIELDS, VMCreate, VMResponse, missing_fields

logger = logging.getLogger(__name__)


class StoreMode(str, enum.Enum):
    LOADING = "loading"
    LIVE = "live"
    FALLBACK = "fallback"


def demo_vms() -> tuple[VMResponse, ...]:
    return tuple(VMResponse(**data) for data in DEMO_VMS)


class VMStore:
    def __init__(self, api: VMApiClient) -> None:
        self._api = api
        self._vms: tuple[VMResponse, ...] = ()
        self._locks: dict[str, asyncio.Lock] = {}
        self.mode = StoreMode.LOADING
        self.error: str | None = None
        self.fallback_reason: str | None = None

    @classmethod
    def from_settings(cls, app_settings: Settings | None = None) -> "VMStore":
        return cls(VMApiClient.from_settings(app_settings))

    async def aclose(self) -> None:
        await self._api.aclose()

    async def __aenter__(self) -> "VMStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # --- Read side ---

    @property
    def vms(self) -> tuple[VMResponse, ...]:
        return self._vms

    @property
    def loading(self) -> bool:
        return self.mode is StoreMode.LOADING

    @property
    def using_fallback(self) -> bool:
        return self.mode is StoreMode.FALLBACK

    @property
    def banner(self) -> str | None:
        """Persistent notice shown while serving demo data."""
        if self.mode is not StoreMode.FALLBACK:
            return None
        reason = self.fallback_reason or "API unavailable"
        return f"Using demo data: {reason}. Retry to reconnect to the database."

    def get(self, vm_id: str) -> VMResponse | None:
        return next((vm for vm in self._vms if vm.id == vm_id), None)

    def clear_error(self) -> None:
        self.error = None

    # --- Cache helpers ---

    def _replace(self, vm_id: str, vm: VMResponse) -> None:
        self._vms = tuple(vm if v.id == vm_id else v for v in self._vms)

    def _prepend(self, vm: VMResponse) -> None:
        self._vms = (vm, *self._vms)

    def _remove(self, vm_id: str) -> None:
        self._vms = tuple(v for v in self._vms if v.id != vm_id)
        self._locks.pop(vm_id, None)

    def _reset(self, vms: tuple[VMResponse, ...]) -> None:
        self._vms = vms
        cached = {vm.id for vm in vms}
        self._locks = {
            vm_id: lock
            for vm_id, lock in self._locks.items()
            if vm_id in cached or lock.locked()
        }

    def _enter_fallback(self, reason: str) -> None:
        self._reset(demo_vms())
        self.error = reason
        self.fallback_reason = reason
        if self.mode is not StoreMode.FALLBACK:
            logger.warning("Switching to demo data", extra={"reason": reason})
        self.mode = StoreMode.FALLBACK

    # --- Operations ---

    async def refresh(self) -> None:
        """Fetch the full collection; fall back to demo data if that fails."""
        self.error = None
        logger.debug("Fetching VMs from API")
        try:
            vms = await self._api.list_vms()
        except VMApiError as exc:
            self._enter_fallback(exc.message)
            return

        self._reset(tuple(vms))
        self.fallback_reason = None
        if self.mode is not StoreMode.LIVE:
            logger.info("VM store live", extra={"count": len(vms)})
        self.mode = StoreMode.LIVE

    async def update_status(self, vm_id: str, status: VMStatus) -> VMResponse | None:
        """Optimistically set ``status``; returns the settled record.

        Returns None when ``vm_id`` is not cached. On API failure the record is
        restored, ``error`` is set and the restored record is returned.
        """
        if self.get(vm_id) is None:
            return None
        lock = self._locks.setdefault(vm_id, asyncio.Lock())
        async with lock:
            before = self.get(vm_id)
            if before is None:
                return None

            optimistic = before.model_copy(update={"status": status})
            self._replace(vm_id, optimistic)

            if self.mode is StoreMode.FALLBACK:
                logger.debug("Fallback mode, status updated locally", extra={"vm_id": vm_id})
                return optimistic

            try:
                updated = await self._api.update_vm(
                    vm_id,
                    status,
                    cpu=before.cpu,
                    memory=before.memory,
                    storage=before.storage,
                )
            except VMApiError as exc:
                self._replace(vm_id, before)
                self.error = exc.message
                logger.warning(
                    "Status update rolled back",
                    extra={"vm_id": vm_id, "status": status.value, "reason": exc.message},
                )
                return before

            self._replace(vm_id, updated)
            return updated

    async def create(self, payload: VMCreate) -> VMResponse:
        """Create a record; raises VMApiError on failure without touching the cache."""
        if self.mode is StoreMode.FALLBACK:
            missing = missing_fields(payload, REQUIRED_CREATE_FIELDS)
            if missing:
                self.error = f"Missing required fields: {', '.join(missing)}"
                raise VMApiError(self.error, details={"missing": missing})
            now = utcnow()
            vm = VMResponse(
                id=f"vm-{uuid.uuid4().hex[:12]}",
                name=payload.name,
                region=payload.region,
                status=payload.status,
                cpu=payload.cpu or 0,
                memory=payload.memory or 0,
                storage=payload.storage or 0,
                ip_address=payload.ip_address,
                created_at=now,
                updated_at=now,
            )
            self._prepend(vm)
            logger.debug("Fallback mode, VM created locally", extra={"vm_id": vm.id})
            return vm

        try:
            vm = await self._api.create_vm(payload)
        except VMApiError as exc:
            self.error = exc.message
            raise
        self._prepend(vm)
        logger.info("VM created", extra={"vm_id": vm.id, "vm_name": vm.name})
        return vm

    async def delete(self, vm_id: str) -> None:
        """Delete a record; raises VMApiError on failure without touching the cache."""
        if self.mode is StoreMode.FALLBACK:
            self._remove(vm_id)
            return

        try:
            await self._api.delete_vm(vm_id)
        except VMApiError as exc:
            self.error = exc.message
            raise
        self._remove(vm_id)
        logger.info("VM deleted", extra={"vm_id": vm_id})

    async def clone(
        self,
        source_id: str,
        name: str | None = None,
        region: str | None = None,
        auto_start: bool = False,
        rng: random.Random | None = None,
    ) -> VMResponse:
        """Create a copy of a cached VM under a new name and region.

        Raises VMApiError and sets ``error`` if ``source_id`` is not cached.
        """
        source = self.get(source_id)
        if source is None:
            self.error = "VM not found"
            raise VMApiError(self.error, details={"id": source_id})
        payload = build_clone_payload(
            source, name=name, region=region, auto_start=auto_start, rng=rng
        )
        return await self.create(payload)
