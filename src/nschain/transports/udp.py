import socket
from typing import Optional


class UDPError(Exception):
    """
    Brief: DNS-over-UDP transport error.

    Inputs:
    - message: description

    Outputs:
    - Exception instance
    """

    pass


def udp_query(
    host: str,
    port: int,
    query: bytes,
    *,
    timeout_ms: int = 5000,
    source_ip: Optional[str] = None,
) -> bytes:
    """
    Brief: Send one wire-format DNS query over UDP and return the first reply.

    Inputs:
    - host: server IP address or hostname (resolved through the OS resolver)
    - port: server UDP port
    - query: wire-format DNS query bytes
    - timeout_ms: read timeout in milliseconds
    - source_ip: optional source address to bind

    Outputs:
    - bytes: wire-format DNS response

    Example:
        >>> try:
        ...     udp_query('127.0.0.1', 53, b'\x00\x01', timeout_ms=10)
        ... except UDPError:
        ...     pass
    """
    try:
        infos = socket.getaddrinfo(host, int(port), 0, socket.SOCK_DGRAM)
    except (OSError, UnicodeError) as e:
        raise UDPError(f"cannot resolve {host}: {e}")
    if not infos:
        raise UDPError(f"cannot resolve {host}: no addresses")

    family, socktype, proto, _canon, addr = infos[0]
    try:
        s = socket.socket(family, socktype, proto)
        try:
            if source_ip:
                s.bind((source_ip, 0))
            s.settimeout(timeout_ms / 1000.0)
            s.sendto(query, addr)
            data, _ = s.recvfrom(4096)
            return data
        finally:
            s.close()
    except socket.timeout:
        raise UDPError(f"UDP timeout after {timeout_ms}ms talking to {host}")
    except OSError as e:
        raise UDPError(f"UDP error: {e}")
