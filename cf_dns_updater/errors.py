class DNSUpdaterError(Exception):
    """
    base class for every error this tool reports to the user
    """


class ConfigError(DNSUpdaterError):
    """
    config file missing, unreadable or invalid
    """


class NetworkError(DNSUpdaterError):
    """
    connection failure or a non-success response from a remote service
    """


class ParseError(DNSUpdaterError):
    """
    a response body that doesn't have the expected shape
    """


class RecordNotFoundError(DNSUpdaterError):
    def __init__(self, record_name: str, record_type: str = "A") -> None:
        super().__init__(f"no {record_type} record named {record_name} in this zone")
        self.record_name = record_name
        self.record_type = record_type
