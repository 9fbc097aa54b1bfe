import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from vmdash.db.base import Base


class VMStatus(str, enum.Enum):
    RUNNING = "Running"
    IDLING = "Idling"
    TERMINATED = "Terminated"
    STARTING = "Starting"
    STOPPING = "Stopping"


# Named regions offered by the dashboard; stored as a flat string, never validated
REGIONS: tuple[str, ...] = (
    "US East (N. Virginia)",
    "US West (Oregon)",
    "EU West (Ireland)",
    "EU Central (Frankfurt)",
    "Asia Pacific (Tokyo)",
)


def utcnow() -> datetime:
    return datetime.now(UTC)


class VirtualMachine(Base):
    __tablename__ = "vms"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    region: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[VMStatus] = mapped_column(
        Enum(VMStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
    )
    cpu: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    memory: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    storage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ip_address: Mapped[str] = mapped_column(String(45), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
