"""Source and contract registry."""

from registry.models import Bytecode, Contract, Source
from registry.store import Registry

__all__ = ["Bytecode", "Contract", "Registry", "Source"]
