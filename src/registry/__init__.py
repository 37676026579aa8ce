"""Registry — реестры market venues и exempt аккаунтов под единым controller."""

from .access_control import ContextRegistry, RegistryKind, UnauthorizedController

__all__ = [
    "ContextRegistry",
    "RegistryKind",
    "UnauthorizedController",
]
