"""Loader for the system resolver configuration (``/etc/resolv.conf``).

Brief:
  The walk bootstraps root discovery from the first ``nameserver`` listed in
  the local resolver configuration. This module parses that file into an
  immutable ResolverConfig. Only ``servers[0]`` feeds the walk; the remaining
  fields are kept so the configuration can be logged faithfully.

Inputs:
  - Path to a resolv.conf style file.

Outputs:
  - ResolverConfig instances, or ConfigError when unusable.
"""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import ConfigError

logger = logging.getLogger("nschain.resolv_conf")

DEFAULT_RESOLV_CONF = "/etc/resolv.conf"
DNS_PORT = 53


@dataclass(frozen=True)
class ResolverConfig:
    """Brief: Parsed local resolver configuration.

    Inputs:
      - servers: Nameserver addresses in file order.
      - search: Search list domains.
      - domain: Local domain name, when present.
      - ndots/timeout/attempts/rotate: Values of the ``options`` line.
      - port: Server port (resolv.conf has no syntax for it; always 53).

    Outputs:
      - Immutable configuration value read once per run.
    """

    servers: Tuple[str, ...]
    search: Tuple[str, ...] = ()
    domain: Optional[str] = None
    ndots: int = 1
    timeout: int = 5
    attempts: int = 2
    rotate: bool = False
    port: int = DNS_PORT

    @property
    def bootstrap_server(self) -> str:
        """Brief: First configured server, used to query the root zone."""

        if not self.servers:
            raise ConfigError("no nameserver configured in resolver configuration")
        return self.servers[0]


def _option_int(value: str, name: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning("ignoring non-numeric resolver option %s:%s", name, value)
        return default


def parse_resolv_conf(text: str, *, source: str = "<string>") -> ResolverConfig:
    """Brief: Parse resolv.conf content into a ResolverConfig.

    Inputs:
      - text: File content.
      - source: Name used in error messages.

    Outputs:
      - ResolverConfig with at least one server.

    Notes:
      - Lines starting with '#' or ';' are comments.
      - ``search`` and ``domain`` override each other; the last one wins, as in
        the C library resolver.
      - IPv6 scope identifiers (``fe80::1%eth0``) are kept verbatim.
    """

    servers: List[str] = []
    search: List[str] = []
    domain: Optional[str] = None
    ndots, timeout, attempts, rotate = 1, 5, 2, False

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line[0] in "#;":
            continue

        parts = line.split()
        keyword, args = parts[0], parts[1:]

        if keyword == "nameserver":
            if not args:
                raise ConfigError(f"{source}: malformed line: {raw_line!r}")
            servers.append(args[0])
        elif keyword == "domain":
            if args:
                domain = args[0]
                search = [args[0]]
        elif keyword == "search":
            search = list(args)
            domain = None
        elif keyword == "options":
            for opt in args:
                name, _, value = opt.partition(":")
                if name == "ndots":
                    ndots = min(_option_int(value, name, ndots), 15)
                elif name == "timeout":
                    timeout = _option_int(value, name, timeout)
                elif name == "attempts":
                    attempts = _option_int(value, name, attempts)
                elif name == "rotate":
                    rotate = True
        else:
            logger.debug("%s: skipping unsupported keyword %r", source, keyword)

    if not servers:
        raise ConfigError(f"{source}: no nameserver configured")

    return ResolverConfig(
        servers=tuple(servers),
        search=tuple(search),
        domain=domain,
        ndots=ndots,
        timeout=timeout,
        attempts=attempts,
        rotate=rotate,
    )


def load_resolv_conf(path: str = DEFAULT_RESOLV_CONF) -> ResolverConfig:
    """Brief: Read and parse a resolver configuration file.

    Inputs:
      - path: Filesystem path (default ``/etc/resolv.conf``).

    Outputs:
      - ResolverConfig.

    Raises:
      - ConfigError: when the file cannot be read or lists no nameserver.
    """

    conf_path = pathlib.Path(path).expanduser()
    try:
        text = conf_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"cannot read resolver configuration {conf_path}: {exc}")

    cfg = parse_resolv_conf(text, source=str(conf_path))
    logger.debug(
        "loaded %s: servers=%s search=%s domain=%s ndots=%d timeout=%d attempts=%d rotate=%s",
        conf_path,
        ",".join(cfg.servers),
        ",".join(cfg.search) or "-",
        cfg.domain or "-",
        cfg.ndots,
        cfg.timeout,
        cfg.attempts,
        cfg.rotate,
    )
    return cfg
