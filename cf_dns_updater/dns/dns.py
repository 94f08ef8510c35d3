from typing import NamedTuple

RecordIdT = str


class ReturnRecordT(NamedTuple):
    record_id: RecordIdT
    name: str
    content: str
    record_type: str
    ttl: int
    proxied: bool


class UpdateRecordT(NamedTuple):
    name: str
    content: str
    record_type: str
    ttl: int
    proxied: bool


RecordListT = list[ReturnRecordT]


class DNSClient:
    """
    abstract class for dns client

    every method that talks to the provider raises NetworkError
    when the request fails and ParseError when the response can't be understood
    """

    def get_domain(self) -> str: ...

    def is_initialized(self) -> bool: ...

    async def init(self): ...

    async def list_records(self, name: str, record_type: str = "A") -> RecordListT: ...

    async def update_record(self, record_id: RecordIdT, record: UpdateRecordT): ...

    async def close(self): ...
