"""Zone Walker: follow the delegation chain from the root to a target zone.

Brief:
  The walk first asks the local resolver for the root NS set, picks one root
  server at random, then appends one label of the target at a time (TLD
  first) and asks the previously picked server for the NS set of the longer
  zone. Each level is represented by an immutable StepResult whose `selected`
  member becomes the parent of the next level.

  www.example.com walks the zones ".", "com.", "example.com.",
  "www.example.com." in that order: n labels, n+1 queries.

  Any failure aborts the walk at the level where it happens. There is no
  retry and no fallback to another member of the same NS set.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from dnslib import DNSRecord

from .errors import ConfigError
from .extract import extract_nameservers, sorted_nameservers
from .query import QueryExecutor
from .resolv_conf import ResolverConfig
from .selector import choose_nameserver

logger = logging.getLogger("nschain.walker")

ROOT_ZONE = "."
NS = "NS"

Executor = Callable[[str, str, str], DNSRecord]
LevelCallback = Callable[[str, str], None]


def fqdn(name: str) -> str:
    """Brief: Return `name` terminated by the root label."""

    name = name.strip()
    if not name or name == ROOT_ZONE:
        return ROOT_ZONE
    return name if name.endswith(".") else name + "."


def split_domain_name(name: str) -> Tuple[str, ...]:
    """Brief: Split a domain name into labels, most specific first.

    Inputs:
      - name: Domain with or without a trailing dot.

    Outputs:
      - Tuple of labels; empty for the root.

    Raises:
      - ValueError: on an empty interior label such as "a..b".
    """

    name = fqdn(name)
    if name == ROOT_ZONE:
        return ()
    labels = tuple(name[:-1].split("."))
    if any(not label for label in labels):
        raise ValueError(f"empty label in domain name {name!r}")
    return labels


def zone_sequence(domain: str) -> List[str]:
    """Brief: Zones visited when walking `domain`, root first.

    Example:
      >>> zone_sequence("www.example.com")
      ['.', 'com.', 'example.com.', 'www.example.com.']
    """

    zones = [ROOT_ZONE]
    assembled = ROOT_ZONE
    for label in reversed(split_domain_name(domain)):
        assembled = label + "." if assembled == ROOT_ZONE else label + "." + assembled
        zones.append(assembled)
    return zones


@dataclass(frozen=True)
class StepResult:
    """Brief: Outcome of one zone level.

    Inputs:
      - zone: Fully-qualified zone that was queried.
      - parent: Server the query was sent to.
      - nameservers: NS targets in response order.
      - selected: Member picked as the parent of the next level.
      - is_final: True when `zone` is the walk target (nothing left to walk).
    """

    zone: str
    parent: str
    nameservers: Tuple[str, ...]
    selected: str
    is_final: bool = False

    @property
    def sorted_nameservers(self) -> List[str]:
        return sorted_nameservers(self.nameservers)


class ZoneWalker:
    """Brief: Drive the root-to-target delegation walk.

    Inputs (constructor):
      - config: ResolverConfig; its first server bootstraps root discovery.
      - executor: Callable `(zone, qtype, server) -> DNSRecord`; defaults to a
        QueryExecutor with the standard 5 second timeout.
      - rng: Optional random.Random used for every next-hop pick.

    Outputs:
      - Instances whose walk() yields one StepResult per zone level.
    """

    def __init__(
        self,
        config: ResolverConfig,
        *,
        executor: Optional[Executor] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not config.servers:
            raise ConfigError("no nameserver configured in resolver configuration")
        self._config = config
        self._executor = executor or QueryExecutor(port=config.port)
        self._rng = rng

    def step(self, zone: str, parent: str, *, is_final: bool = False) -> StepResult:
        """Brief: Query `parent` for the NS set of `zone` and pick the next hop.

        Inputs:
          - zone: Fully-qualified zone name.
          - parent: Server to ask.
          - is_final: Marks the target level.

        Outputs:
          - StepResult for this level.

        Raises:
          - TransportError, ProtocolError, DelegationError from the collaborators.
        """

        response = self._executor(zone, NS, parent)
        nameservers = extract_nameservers(response, zone)
        selected = choose_nameserver(nameservers, self._rng)
        logger.debug(
            "%s: %d nameserver(s) from %s, next hop %s",
            zone,
            len(nameservers),
            parent,
            selected,
        )
        return StepResult(
            zone=zone,
            parent=parent,
            nameservers=nameservers,
            selected=selected,
            is_final=is_final,
        )

    def walk(
        self, domain: str, *, on_level: Optional[LevelCallback] = None
    ) -> Iterator[StepResult]:
        """Brief: Yield StepResults from the root zone down to `domain`.

        Inputs:
          - domain: Target name, with or without trailing dot.
          - on_level: Optional `(zone, parent)` callback invoked before each
            level is queried, so a failing level can still be announced.

        Outputs:
          - Iterator producing n+1 StepResults for an n-label domain. Results
            are produced lazily so that a failure leaves deeper levels
            unreported.
        """

        zones = zone_sequence(domain)
        target = zones[-1]
        logger.info("walking delegation chain for %s (%d levels)", target, len(zones))

        # The root NS set always marks its next hop, even for a root target.
        bootstrap = self._config.bootstrap_server
        logger.debug("root discovery via local resolver %s", bootstrap)
        if on_level:
            on_level(ROOT_ZONE, bootstrap)
        current = self.step(ROOT_ZONE, bootstrap)
        yield current

        for zone in zones[1:]:
            if on_level:
                on_level(zone, current.selected)
            current = self.step(zone, current.selected, is_final=zone == target)
            yield current

        logger.info("reached %s via %s", target, current.parent)


def walk(
    domain: str,
    config: ResolverConfig,
    *,
    executor: Optional[Executor] = None,
    rng: Optional[random.Random] = None,
) -> List[StepResult]:
    """Brief: Run a full walk and return every level's StepResult."""

    return list(ZoneWalker(config, executor=executor, rng=rng).walk(domain))
