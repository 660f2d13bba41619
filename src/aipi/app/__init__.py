"""Resource registry, app handle and resource base class."""

from .app import AipiApp
from .registry import AipiPreset, AipiRegistry, BootstrapOptions, RegistryEntry
from .resource import Covering, Resource

__all__ = [
    "AipiApp",
    "AipiPreset",
    "AipiRegistry",
    "BootstrapOptions",
    "Covering",
    "RegistryEntry",
    "Resource",
]
