from vmdash.models.vm import REGIONS, VirtualMachine, VMStatus

__all__ = ["VirtualMachine", "VMStatus", "REGIONS"]
