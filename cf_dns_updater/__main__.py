import asyncio
import sys
from pathlib import Path

from .config import CONFIG_PATH, Config, load_config
from .dns.cloudflare import CloudflareDNSClient
from .dns.dns import DNSClient
from .errors import ConfigError, NetworkError, ParseError
from .ip.resolver import CloudflareTraceResolver, IPResolver
from .logger import logger, set_logging_level
from .updater import Updater, UpdateResultT


def print_result(result: UpdateResultT, ip: str):
    if result.success:
        print(f"Setting IP of {result.record_name} to {ip}", flush=True)
    else:
        print(
            f"Failed to set IP of {result.record_name} to {ip}: {result.error}",
            flush=True,
        )


async def run(config: Config, ip_resolver: IPResolver, dns_client: DNSClient) -> int:
    """
    :return: the exit status, 0 only if every configured record was updated
    """
    try:
        ip = await ip_resolver.get_ip()
    except (NetworkError, ParseError) as e:
        logger.error(f"failed to get the current ip: {e}")
        return 1
    print(f"Current IP: {ip}", flush=True)

    updater = Updater(dns_client, config.ttl)
    try:
        results = await updater.update_all(
            config.subdomains, ip, on_result=lambda result: print_result(result, ip)
        )
    except (NetworkError, ParseError) as e:
        logger.error(f"failed to get the domain of zone {config.zone_id}: {e}")
        return 1

    failed = [result for result in results if not result.success]
    if failed:
        logger.error(f"{len(failed)} of {len(results)} records were not updated")
        return 1

    logger.info(f"{len(results)} records updated")
    return 0


async def main(config_path: str | Path = CONFIG_PATH) -> int:
    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error(str(e))
        return 1
    set_logging_level(config.logging_level)

    ip_resolver = CloudflareTraceResolver()
    dns_client = CloudflareDNSClient(config.zone_id, config.api_token, config.domain)
    try:
        return await run(config, ip_resolver, dns_client)
    finally:
        await ip_resolver.close()
        await dns_client.close()


def cli():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
