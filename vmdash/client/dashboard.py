"""Derived values the dashboard shows next to the VM table."""

import random
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from vmdash.models.vm import VMStatus
from vmdash.schemas.vm import VMCreate, VMResponse

CRITICAL_USAGE = 80
WARNING_USAGE = 60


@dataclass(frozen=True)
class DashboardSummary:
    total: int
    running: int
    regions: int
    avg_cpu: float
    avg_memory: float
    avg_storage: float
    by_status: dict[VMStatus, int] = field(default_factory=dict)


def summarize(vms: Iterable[VMResponse]) -> DashboardSummary:
    vms = list(vms)
    total = len(vms)

    def _avg(values: list[int]) -> float:
        return round(sum(values) / total, 1) if total else 0.0

    by_status = Counter(vm.status for vm in vms)
    return DashboardSummary(
        total=total,
        running=by_status.get(VMStatus.RUNNING, 0),
        regions=len({vm.region for vm in vms}),
        avg_cpu=_avg([vm.cpu for vm in vms]),
        avg_memory=_avg([vm.memory for vm in vms]),
        avg_storage=_avg([vm.storage for vm in vms]),
        by_status=dict(by_status),
    )


def resource_level(usage: int) -> str:
    """Bucket a usage percentage: ``critical`` (>= 80), ``warning`` (>= 60) or ``normal``."""
    if usage >= CRITICAL_USAGE:
        return "critical"
    if usage >= WARNING_USAGE:
        return "warning"
    return "normal"


def _random_ip(rng: random.Random) -> str:
    return ".".join(str(rng.randrange(255)) for _ in range(4))


def build_clone_payload(
    source: VMResponse,
    name: str | None = None,
    region: str | None = None,
    auto_start: bool = False,
    rng: random.Random | None = None,
) -> VMCreate:
    """Build the create request for a clone of ``source``.

    A clone starts with fresh resource figures and a new address; it boots
    immediately only when ``auto_start`` is set.
    """
    rng = rng or random.Random()
    return VMCreate(
        name=name or f"{source.name}-clone",
        region=region or source.region,
        status=VMStatus.STARTING if auto_start else VMStatus.TERMINATED,
        cpu=rng.randrange(10, 40),
        memory=rng.randrange(20, 60),
        storage=rng.randrange(30, 80),
        ip_address=_random_ip(rng),
    )
