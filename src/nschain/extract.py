"""NS Extractor: pull nameserver hostnames out of a DNS response."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple

from dnslib import QTYPE, DNSRecord

from .errors import DelegationError

logger = logging.getLogger("nschain.extract")


def _ns_targets(section: Iterable) -> List[str]:
    return [str(rr.rdata.label) for rr in section if rr.rtype == QTYPE.NS]


def extract_nameservers(response: DNSRecord, zone: str) -> Tuple[str, ...]:
    """Brief: Return the NS target hostnames carried by `response`.

    Inputs:
      - response: Parsed DNSRecord from the Query Executor.
      - zone: Zone that was queried, used in the error message.

    Outputs:
      - Tuple of hostnames in response order (unsorted).

    Raises:
      - DelegationError: neither answer nor authority holds an NS record.

    Notes:
      - The authority section is consulted only when the answer section holds
        no NS record. An authoritative server often returns its own NS set in
        the authority section, and a parent returns a referral there; both are
        treated alike.
    """

    nameservers = _ns_targets(getattr(response, "rr", None) or [])
    if not nameservers:
        # No NS in "Answer", fall back to the Authority section.
        nameservers = _ns_targets(getattr(response, "auth", None) or [])
        if nameservers:
            logger.debug("%s: using %d NS from authority section", zone, len(nameservers))

    if not nameservers:
        raise DelegationError(zone)

    return tuple(nameservers)


def sorted_nameservers(nameservers: Sequence[str]) -> List[str]:
    """Brief: Lexicographically sorted copy for display only."""

    return sorted(nameservers)
