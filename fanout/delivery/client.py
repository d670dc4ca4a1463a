"""HTTP client for webhook delivery, with optional SSRF protection."""

import asyncio
import ipaddress
import logging
import socket
from typing import Optional

import httpx

from fanout.config import settings

logger = logging.getLogger(__name__)

_BLOCKED_NETWORKS = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]

_BLOCKED_HOSTNAMES = {
    "localhost",
    "metadata",
    "metadata.google.internal",
}


class BlockedDestinationError(Exception):
    """The webhook URL points at an address the delivery policy refuses."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


def _is_ip_blocked(ip_str: str) -> bool:
    try:
        ip = ipaddress.ip_address(ip_str)
        return any(ip in network for network in _BLOCKED_NETWORKS)
    except ValueError:
        return True


class SSRFSafeTransport(httpx.AsyncHTTPTransport):
    """
    Refuses to connect to internal hostnames or private/reserved addresses.

    A refusal raises BlockedDestinationError rather than an httpx transport
    error: it is a permanent policy decision, not a transient fault.
    """

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        hostname = request.url.host
        if hostname:
            url = str(request.url)
            if hostname.lower() in _BLOCKED_HOSTNAMES:
                raise BlockedDestinationError(f"Blocked hostname: {hostname}", url)
            try:
                addr_infos = await asyncio.get_running_loop().getaddrinfo(
                    hostname, None, type=socket.SOCK_STREAM
                )
            except socket.gaierror:
                raise httpx.ConnectError(f"Cannot resolve hostname: {hostname}", request=request)
            for _, _, _, _, sockaddr in addr_infos:
                if _is_ip_blocked(sockaddr[0]):
                    logger.warning("Refusing delivery to %s: resolves to %s", hostname, sockaddr[0])
                    raise BlockedDestinationError(
                        f"DNS resolved to blocked IP for {hostname}", url
                    )
        return await super().handle_async_request(request)


def build_http_client(
    connect_timeout: Optional[float] = None,
    read_timeout: Optional[float] = None,
    block_private_networks: Optional[bool] = None,
    **kwargs,
) -> httpx.AsyncClient:
    """
    Build the client used for webhook delivery.

    Redirects are never followed: a 3xx answer is classified by the
    dispatcher as a delivery error.
    """
    connect = settings.http_connect_timeout if connect_timeout is None else connect_timeout
    read = settings.http_read_timeout if read_timeout is None else read_timeout
    if block_private_networks is None:
        block_private_networks = settings.block_private_networks

    timeout = httpx.Timeout(read, connect=connect)
    if block_private_networks:
        kwargs.setdefault("transport", SSRFSafeTransport())
    return httpx.AsyncClient(timeout=timeout, follow_redirects=False, **kwargs)
