"""Error taxonomy for the delegation walk.

Every error raised here is fatal to a walk: the CLI reports it and exits with a
non-zero status. There is no retry and no fallback server.
"""

from __future__ import annotations

from typing import Optional


class WalkError(Exception):
    """Brief: Base class for all failures that abort a delegation walk."""


class ConfigError(WalkError):
    """Brief: Local resolver configuration is missing, unreadable or empty."""


class TransportError(WalkError):
    """Brief: A UDP exchange failed (timeout, unreachable, malformed datagram).

    Inputs:
      - message: Human readable description.
      - server: Optional server the exchange was directed at.
    """

    def __init__(self, message: str, *, server: Optional[str] = None) -> None:
        super().__init__(message)
        self.server = server


class ProtocolError(WalkError):
    """Brief: A response arrived but its rcode was neither NOERROR nor NXDOMAIN.

    Inputs:
      - message: Human readable description.
      - rcode: Numeric response code carried by the reply.
    """

    def __init__(self, message: str, *, rcode: Optional[int] = None) -> None:
        super().__init__(message)
        self.rcode = rcode


class DelegationError(WalkError):
    """Brief: A response held no NS records in either answer or authority."""

    def __init__(self, zone: str) -> None:
        super().__init__(f"no nameservers found for zone {zone}")
        self.zone = zone
