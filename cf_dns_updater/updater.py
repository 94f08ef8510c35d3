"""
Responsibility: point the configured A records at the current ip

as for naming,

the `sub_domain` is the name as written in the config, `@` for the zone apex
    for example, `home`

the `record_name` is the fully qualified name the provider knows the record by
    for example, `home.example.com`, or `example.com` for the apex
"""

from typing import Callable, NamedTuple, Optional

from .config import APEX, SubdomainConfig
from .dns.dns import DNSClient, RecordIdT, UpdateRecordT
from .errors import NetworkError, ParseError, RecordNotFoundError
from .logger import logger


class UpdateResultT(NamedTuple):
    sub_domain: str
    record_name: str
    # None if the record was updated
    error: Optional[str]

    @property
    def success(self) -> bool:
        return self.error is None


UpdateResultListT = list[UpdateResultT]


def get_record_name(sub_domain: str, domain: str) -> str:
    if sub_domain in ("", APEX):
        return domain
    return f"{sub_domain}.{domain}"


class Updater:
    def __init__(self, dns_client: DNSClient, ttl: int) -> None:
        self._dns_client = dns_client
        self._ttl = ttl

    async def _find_record_id(self, record_name: str) -> RecordIdT:
        """
        :raises RecordNotFoundError: if there is no A record with this name
        """
        records = await self._dns_client.list_records(record_name, "A")
        if not records:
            raise RecordNotFoundError(record_name)
        if len(records) > 1:
            logger.warning(
                f"{len(records)} A records named {record_name}, "
                f"only updating the first one ({records[0].record_id})"
            )
        return records[0].record_id

    async def update_subdomain(self, subdomain: SubdomainConfig, ip: str) -> UpdateResultT:
        """
        never raises for a per record failure, the error ends up in the result
        """
        record_name = get_record_name(subdomain.name, self._dns_client.get_domain())
        try:
            if subdomain.id is not None:
                record_id = subdomain.id
            else:
                record_id = await self._find_record_id(record_name)

            await self._dns_client.update_record(
                record_id,
                UpdateRecordT(
                    name=record_name,
                    content=ip,
                    record_type="A",
                    ttl=self._ttl,
                    proxied=subdomain.proxied,
                ),
            )
        except (NetworkError, ParseError, RecordNotFoundError) as e:
            logger.debug(f"failed to update {record_name}: {e!r}")
            return UpdateResultT(subdomain.name, record_name, str(e))

        logger.debug(f"updated {record_name} to {ip}")
        return UpdateResultT(subdomain.name, record_name, None)

    async def update_all(
        self,
        subdomains: list[SubdomainConfig],
        ip: str,
        on_result: Optional[Callable[[UpdateResultT], None]] = None,
    ) -> UpdateResultListT:
        """
        update the subdomains one after another in the given order,
        a failed subdomain doesn't stop the rest.
        on_result is called as soon as each subdomain is done

        :raises NetworkError: if the zone's domain is needed and couldn't be fetched
        :raises ParseError: if the zone's domain is needed and couldn't be parsed
        """
        if not subdomains:
            return UpdateResultListT()

        if not self._dns_client.is_initialized():
            await self._dns_client.init()

        results = UpdateResultListT()
        for subdomain in subdomains:
            result = await self.update_subdomain(subdomain, ip)
            if on_result is not None:
                on_result(result)
            results.append(result)
        return results
