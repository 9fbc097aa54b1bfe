"""Fixed demo dataset.

Served by VMStore when the API is unreachable, and optionally inserted into
an empty ``vms`` table at startup (``SEED_DEMO_DATA=true``).
"""

from vmdash.models.vm import VMStatus

DEMO_VMS: tuple[dict[str, object], ...] = (
    {
        "id": "vm-001",
        "name": "web-server-prod",
        "region": "US East (N. Virginia)",
        "status": VMStatus.RUNNING,
        "cpu": 75,
        "memory": 68,
        "storage": 45,
        "ip_address": "54.123.45.67",
    },
    {
        "id": "vm-002",
        "name": "database-primary",
        "region": "EU West (Ireland)",
        "status": VMStatus.RUNNING,
        "cpu": 45,
        "memory": 82,
        "storage": 67,
        "ip_address": "34.245.78.90",
    },
    {
        "id": "vm-003",
        "name": "api-gateway",
        "region": "Asia Pacific (Tokyo)",
        "status": VMStatus.IDLING,
        "cpu": 12,
        "memory": 25,
        "storage": 23,
        "ip_address": "13.114.56.78",
    },
    {
        "id": "vm-004",
        "name": "backup-server",
        "region": "US West (Oregon)",
        "status": VMStatus.TERMINATED,
        "cpu": 0,
        "memory": 0,
        "storage": 89,
        "ip_address": "52.89.123.45",
    },
    {
        "id": "vm-005",
        "name": "dev-environment",
        "region": "EU Central (Frankfurt)",
        "status": VMStatus.STARTING,
        "cpu": 35,
        "memory": 40,
        "storage": 15,
        "ip_address": "18.195.67.89",
    },
)
