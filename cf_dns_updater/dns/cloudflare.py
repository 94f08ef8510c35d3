import asyncio
import json as jsonlib
from typing import Any, Literal, Optional, TypedDict, cast

import aiohttp

from ..errors import NetworkError, ParseError
from ..logger import logger
from .dns import DNSClient, RecordIdT, RecordListT, ReturnRecordT, UpdateRecordT

API_BASE = "https://api.cloudflare.com/client/v4"


class CloudflareErrorT(TypedDict):
    code: int
    message: str


class CloudflareResponseT(TypedDict):
    success: bool
    errors: list[CloudflareErrorT]
    messages: list[Any]
    result: Any


# --- GET zones/{zone_id} ---
class CloudflareZoneT(TypedDict):
    id: str
    name: str


# --- GET zones/{zone_id}/dns_records ---
class CloudflareRecordT(TypedDict):
    id: str
    type: str
    name: str
    content: str
    ttl: int
    proxied: bool


class CloudflareListRecordsParamsT(TypedDict):
    type: str
    name: str


# --- PUT zones/{zone_id}/dns_records/{record_id} ---
class CloudflareUpdateRecordT(TypedDict):
    type: str
    name: str
    content: str
    ttl: int
    proxied: bool


def _format_errors(errors: Any) -> str:
    if not errors:
        return "no error details"
    try:
        return ", ".join(f"[{error['code']}] {error['message']}" for error in errors)
    except (KeyError, TypeError):
        return str(errors)


class CloudflareDNSClient(DNSClient):
    """
    cloudflare v4 api client, scoped to a single zone
    """

    def __init__(
        self,
        zone_id: str,
        api_token: str,
        domain: Optional[str] = None,
        base_url: str = API_BASE,
        timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {api_token}"}
        if timeout is None:
            self._session = aiohttp.ClientSession(headers=headers)
        else:
            self._session = aiohttp.ClientSession(headers=headers, timeout=timeout)
        self._zone_id = zone_id

        self._base_url = base_url
        if not self._base_url.endswith("/"):
            self._base_url += "/"

        self._domain: str
        if domain is not None:
            self._domain = domain

    def get_domain(self) -> str:
        return self._domain

    def is_initialized(self) -> bool:
        return hasattr(self, "_domain")

    async def init(self):
        """
        Reads the zone's base domain. Must be called before computing any record name,
        unless the domain was passed to the constructor.

        :raises NetworkError: if failed to get the zone
        :raises ParseError: if the zone doesn't have a name
        """
        response = await self._send_request("GET", f"zones/{self._zone_id}")
        try:
            zone = cast(CloudflareZoneT, response)
            self._domain = zone["name"]
        except (KeyError, TypeError) as e:
            raise ParseError(f"zone {self._zone_id} has no name in response") from e

        logger.debug(f"zone {self._zone_id} is {self._domain}")

    async def close(self):
        await self._session.close()

    async def _send_request(
        self,
        method: Literal["GET", "PUT"],
        path: str,
        params: Optional[CloudflareListRecordsParamsT] = None,
        json: Optional[CloudflareUpdateRecordT] = None,
    ) -> Any:
        """
        send one request and unwrap the `result` of the response envelope

        :raises NetworkError: if the request failed or timed out, or cloudflare reported an error
        :raises ParseError: if the response isn't a cloudflare response envelope
        """
        url = self._base_url + path
        logger.debug(f"{method} {url} {params or ''}")
        try:
            async with self._session.request(
                method, url, params=params, json=json
            ) as response:
                status = response.status
                response_bytes = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"{method} {url} failed: {e!r}") from e

        try:
            # UnicodeDecodeError is a ValueError too
            body = jsonlib.loads(response_bytes.decode())
        except ValueError as e:
            if status // 100 != 2:
                raise NetworkError(f"{method} {url} returned HTTP {status}") from e
            raise ParseError(f"{method} {url} returned invalid json") from e

        if not isinstance(body, dict):
            raise ParseError(f"{method} {url} returned an unexpected response")
        body = cast(CloudflareResponseT, body)

        if status // 100 != 2 or not body.get("success", False):
            raise NetworkError(
                f"{method} {url} returned HTTP {status}: "
                f"{_format_errors(body.get('errors'))}"
            )
        if "result" not in body:
            raise ParseError(f"{method} {url} returned no result")

        return body["result"]

    async def list_records(self, name: str, record_type: str = "A") -> RecordListT:
        """
        list the records in this zone with exactly this name and type

        :raises NetworkError: if failed to call the list dns records api
        :raises ParseError: if a returned record is missing fields
        """
        response = await self._send_request(
            "GET",
            f"zones/{self._zone_id}/dns_records",
            params={"type": record_type, "name": name},
        )
        if not isinstance(response, list):
            raise ParseError("dns record list is not a list")
        record_list = cast(list[CloudflareRecordT], response)

        try:
            return [
                ReturnRecordT(
                    record_id=record["id"],
                    name=record["name"],
                    content=record["content"],
                    record_type=record["type"],
                    ttl=record["ttl"],
                    proxied=record.get("proxied", False),
                )
                for record in record_list
            ]
        except (KeyError, TypeError) as e:
            raise ParseError(f"malformed dns record in response: {e}") from e

    async def update_record(self, record_id: RecordIdT, record: UpdateRecordT):
        """
        overwrite an existing record

        :raises NetworkError: if failed to call the update dns record api
        """
        await self._send_request(
            "PUT",
            f"zones/{self._zone_id}/dns_records/{record_id}",
            json={
                "type": record.record_type,
                "name": record.name,
                "content": record.content,
                "ttl": record.ttl,
                "proxied": record.proxied,
            },
        )
