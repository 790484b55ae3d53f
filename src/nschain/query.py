"""Query Executor: one DNS question, one UDP exchange, one parsed reply.

A fresh message is built for every call, so nothing is shared between
exchanges and callers may issue queries in any order.
"""

from __future__ import annotations

import logging
from typing import Union

from dnslib import QTYPE, RCODE, DNSRecord

from .errors import ProtocolError, TransportError
from .transports.udp import UDPError
from .transports.udp import udp_query as _udp_transport_query

logger = logging.getLogger("nschain.query")

DEFAULT_TIMEOUT = 5.0
DNS_PORT = 53


def udp_query(host: str, port: int, wire: bytes, *, timeout_ms: int) -> bytes:
    """Brief: DNS-over-UDP helper used by query() and replaced in tests.

    Inputs:
      - host: Server address or hostname.
      - port: Server UDP port.
      - wire: Wire-format DNS query bytes.
      - timeout_ms: Read timeout in milliseconds.

    Outputs:
      - bytes: Wire-format DNS response bytes.
    """

    return _udp_transport_query(host, int(port), wire, timeout_ms=timeout_ms)


def build_question(zone: str, qtype: Union[str, int]) -> DNSRecord:
    """Brief: Build a single-question query with the RD bit set.

    Inputs:
      - zone: Fully-qualified owner name to ask about.
      - qtype: Record type as name ("NS") or numeric code.

    Outputs:
      - DNSRecord ready to pack.
    """

    # DNSRecord.question expects the textual type name.
    qtype_name = QTYPE[qtype] if isinstance(qtype, int) else qtype
    req = DNSRecord.question(zone, qtype_name)
    req.header.rd = 1
    return req


def query(
    zone: str,
    qtype: Union[str, int],
    server: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    port: int = DNS_PORT,
) -> DNSRecord:
    """Brief: Ask `server` one question over UDP and return the parsed reply.

    Inputs:
      - zone: Fully-qualified zone name.
      - qtype: Record type (always NS for the walk).
      - server: Server host (no port; `port` defaults to 53).
      - timeout: Read timeout in seconds.
      - port: Destination UDP port.

    Outputs:
      - DNSRecord whose rcode is NOERROR or NXDOMAIN.

    Raises:
      - TransportError: timeout, unreachable server, unparseable datagram or a
        reply that does not match the question id.
      - ProtocolError: any rcode other than NOERROR/NXDOMAIN.
    """

    req = build_question(zone, qtype)
    wire = req.pack()

    try:
        resp_wire = udp_query(server, int(port), wire, timeout_ms=int(timeout * 1000))
    except UDPError as exc:
        raise TransportError(str(exc), server=server) from exc

    try:
        resp = DNSRecord.parse(resp_wire)
    except Exception as exc:
        raise TransportError(
            f"malformed response from {server}: {exc}", server=server
        ) from exc

    if resp.header.id != req.header.id:
        raise TransportError(
            f"response id {resp.header.id} from {server} does not match "
            f"query id {req.header.id}",
            server=server,
        )

    rcode = resp.header.rcode
    logger.debug(
        "%s %s @%s -> %s", zone, QTYPE[req.q.qtype], server, RCODE.get(rcode, rcode)
    )
    if rcode not in (RCODE.NOERROR, RCODE.NXDOMAIN):
        raise ProtocolError(
            f"no nameserver answered the question {zone} "
            f"(@{server} returned {RCODE.get(rcode, rcode)})",
            rcode=rcode,
        )

    return resp


class QueryExecutor:
    """Brief: query() with timeout and port bound, passed to ZoneWalker.

    Inputs (constructor):
      - timeout: Read timeout in seconds (default 5).
      - port: Destination UDP port (default 53).

    Outputs:
      - Callable `executor(zone, qtype, server) -> DNSRecord`.
    """

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT, port: int = DNS_PORT) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = float(timeout)
        self.port = int(port)

    def __call__(self, zone: str, qtype: Union[str, int], server: str) -> DNSRecord:
        return query(zone, qtype, server, timeout=self.timeout, port=self.port)
