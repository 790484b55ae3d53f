"""
Brief: Global pytest configuration and shared DNS response builders.

Inputs:
  - None

Outputs:
  - None
"""

import os
import signal
import sys
from typing import Dict, Iterable, List, Optional, Tuple

import pytest
from dnslib import NS, QTYPE, RCODE, RR, SOA, DNSRecord

# Ensure 'src' is on sys.path so 'nschain' is importable without installing.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_DIR = os.path.join(ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


def _alarm_handler(signum, frame):
    raise TimeoutError("Test exceeded 10 seconds")


if hasattr(signal, "SIGALRM"):
    signal.signal(signal.SIGALRM, _alarm_handler)


@pytest.fixture(autouse=True)
def enforce_test_timeout():
    """
    Brief: Enforce a hard 10-second timeout for each test.

    Inputs:
      - None

    Outputs:
      - None: Cancels alarm after test
    """
    if hasattr(signal, "SIGALRM"):
        signal.alarm(10)
        try:
            yield
        finally:
            signal.alarm(0)
    else:
        yield


def make_response(
    zone: str,
    *,
    answer: Iterable[str] = (),
    authority: Iterable[str] = (),
    rcode: int = RCODE.NOERROR,
    with_soa: bool = False,
    request: Optional[DNSRecord] = None,
) -> DNSRecord:
    """Brief: Build an NS response for `zone`.

    Inputs:
      - zone: Owner name of the NS records.
      - answer: NS targets placed in the answer section.
      - authority: NS targets placed in the authority section.
      - rcode: Response code.
      - with_soa: Add a SOA record to the authority section.
      - request: Optional query to reply to (keeps the message id).

    Outputs:
      - DNSRecord reply.
    """

    q = request or DNSRecord.question(zone, "NS")
    r = q.reply()
    r.header.rcode = rcode
    for target in answer:
        r.add_answer(RR(zone, QTYPE.NS, rdata=NS(target), ttl=300))
    for target in authority:
        r.add_auth(RR(zone, QTYPE.NS, rdata=NS(target), ttl=300))
    if with_soa:
        r.add_auth(
            RR(
                zone,
                QTYPE.SOA,
                rdata=SOA(f"ns.{zone}", f"hostmaster.{zone}", (1, 300, 300, 300, 300)),
                ttl=300,
            )
        )
    return r


class FakeExecutor:
    """Brief: Stand-in for QueryExecutor answering from a (zone, server) table.

    Inputs (constructor):
      - table: Mapping of (zone, server) -> list of NS targets, or an Exception
        instance to raise for that exchange.

    Outputs:
      - Callable recording every (zone, qtype, server) it was asked.
    """

    def __init__(self, table: Dict[Tuple[str, str], object]):
        self.table = table
        self.calls: List[Tuple[str, str, str]] = []

    def __call__(self, zone: str, qtype: str, server: str) -> DNSRecord:
        self.calls.append((zone, qtype, server))
        entry = self.table[(zone, server)]
        if isinstance(entry, Exception):
            raise entry
        return make_response(zone, answer=entry)
