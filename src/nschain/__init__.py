"""nschain: trace the DNS delegation chain from the root to a zone."""

from .errors import (
    ConfigError,
    DelegationError,
    ProtocolError,
    TransportError,
    WalkError,
)
from .resolv_conf import ResolverConfig, load_resolv_conf
from .walker import StepResult, ZoneWalker, walk, zone_sequence

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DelegationError",
    "ProtocolError",
    "ResolverConfig",
    "StepResult",
    "TransportError",
    "WalkError",
    "ZoneWalker",
    "load_resolv_conf",
    "walk",
    "zone_sequence",
]
