"""
Responsibility: find out the public ipv4 address of this host
"""

import asyncio
import ipaddress
from typing import Optional

import aiohttp

from ..errors import NetworkError, ParseError
from ..logger import logger

TRACE_URL = "https://1.1.1.1/cdn-cgi/trace"


def parse_trace(trace: str) -> str:
    """
    extract the ip from a cdn-cgi/trace body, which looks like

        fl=123f45
        h=1.1.1.1
        ip=73.172.10.94
        ...

    :raises ParseError: if there is no ip line or the ip isn't ipv4
    """
    for line in trace.split():
        key, sep, value = line.partition("=")
        if sep and key == "ip":
            break
    else:
        raise ParseError("no ip found in trace response")

    try:
        return str(ipaddress.IPv4Address(value))
    except ipaddress.AddressValueError as e:
        raise ParseError(f"{value!r} is not an ipv4 address") from e


class IPResolver:
    """
    abstract class for public ip resolver
    """

    async def get_ip(self) -> str: ...

    async def close(self): ...


class CloudflareTraceResolver(IPResolver):
    def __init__(
        self, url: str = TRACE_URL, timeout: Optional[aiohttp.ClientTimeout] = None
    ) -> None:
        if timeout is None:
            self._session = aiohttp.ClientSession()
        else:
            self._session = aiohttp.ClientSession(timeout=timeout)
        self._url = url

    async def get_ip(self) -> str:
        """
        one request, no retry

        :raises NetworkError: if the request failed, timed out or didn't return 2xx
        :raises ParseError: if the response doesn't contain an ipv4 address
        """
        logger.debug(f"GET {self._url}")
        try:
            async with self._session.get(self._url) as response:
                if response.status // 100 != 2:
                    raise NetworkError(
                        f"GET {self._url} returned HTTP {response.status}"
                    )
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"GET {self._url} failed: {e!r}") from e

        try:
            trace = body.decode()
        except UnicodeDecodeError as e:
            raise ParseError(f"GET {self._url} returned a body that isn't utf-8") from e

        return parse_trace(trace)

    async def close(self):
        await self._session.close()
