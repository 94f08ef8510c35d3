from pathlib import Path
from typing import Callable

import pytest
import yaml

from cf_dns_updater.dns.dns import (
    DNSClient,
    RecordIdT,
    RecordListT,
    ReturnRecordT,
    UpdateRecordT,
)
from cf_dns_updater.errors import NetworkError
from cf_dns_updater.ip.resolver import IPResolver


class DummyDNSClient(DNSClient):
    def __init__(self, domain: str | None = "example.com"):
        self._domain = domain
        self._records = dict[RecordIdT, ReturnRecordT]()
        self._next_id = 0
        self._failing_names = set[str]()
        self.calls = list[tuple[str, ...]]()

    def _get_next_id(self) -> RecordIdT:
        self._next_id += 1
        return f"record{self._next_id}"

    def add_record(self, name: str, content: str = "1.1.1.1", record_type: str = "A"):
        record_id = self._get_next_id()
        self._records[record_id] = ReturnRecordT(
            record_id=record_id,
            name=name,
            content=content,
            record_type=record_type,
            ttl=1,
            proxied=False,
        )
        return record_id

    def fail_on(self, name: str):
        self._failing_names.add(name)

    def get_record(self, record_id: RecordIdT) -> ReturnRecordT:
        return self._records[record_id]

    def get_domain(self) -> str:
        assert self._domain is not None
        return self._domain

    def is_initialized(self) -> bool:
        return self._domain is not None

    async def init(self):
        self.calls.append(("init",))
        self._domain = "example.com"

    async def list_records(self, name: str, record_type: str = "A") -> RecordListT:
        self.calls.append(("list", name, record_type))
        if name in self._failing_names:
            raise NetworkError(f"GET {name} failed")
        return [
            record
            for record in self._records.values()
            if record.name == name and record.record_type == record_type
        ]

    async def update_record(self, record_id: RecordIdT, record: UpdateRecordT):
        self.calls.append(("update", record_id, record.name))
        if record_id not in self._records:
            raise NetworkError(f"PUT {record_id} returned HTTP 404")
        self._records[record_id] = ReturnRecordT(
            record_id=record_id,
            name=record.name,
            content=record.content,
            record_type=record.record_type,
            ttl=record.ttl,
            proxied=record.proxied,
        )


class DummyIPResolver(IPResolver):
    def __init__(self, ip: str = "73.172.10.94", error: Exception | None = None):
        self._ip = ip
        self._error = error
        self.calls = 0

    async def get_ip(self) -> str:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._ip


@pytest.fixture
def dns_client() -> DummyDNSClient:
    return DummyDNSClient("example.com")


@pytest.fixture
def ip_resolver() -> DummyIPResolver:
    return DummyIPResolver()


@pytest.fixture
def dummy_ip_resolver_cls() -> type[DummyIPResolver]:
    return DummyIPResolver


@pytest.fixture
def dummy_dns_client_cls() -> type[DummyDNSClient]:
    return DummyDNSClient


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    # keep a developer's own token or .env out of the tests
    for name in ("API_TOKEN", "ZONE_ID", "TTL", "SUBDOMAINS", "DOMAIN", "LOGGING_LEVEL"):
        monkeypatch.delenv(f"CF_DDNS_{name}", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    def write(content: dict | str, name: str = "config.yml") -> Path:
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content)
        else:
            path.write_text(yaml.safe_dump(content))
        return path

    return write


@pytest.fixture
def valid_config() -> dict:
    return {
        "api_token": "token",
        "zone_id": "zone",
        "ttl": 120,
        "subdomains": [
            {"name": "", "proxied": False},
            {"name": "home", "proxied": True},
        ],
    }
