"""Resolved configuration handed to the management transport."""

from dataclasses import dataclass, field

_HTTPS_PROTOCOLS = frozenset({"https", "https-remoting", "remote+https"})


@dataclass(frozen=True, slots=True)
class ConnectionConfig:
    """Everything needed to open a management connection, credentials included."""

    host: str
    port: int
    timeout: int
    protocol: str | None = None
    username: str | None = None
    password: str | None = field(default=None, repr=False)

    @property
    def connection_timeout(self) -> int:
        """Connection timeout in milliseconds."""
        return self.timeout * 1000

    @property
    def scheme(self) -> str:
        if self.protocol is not None and self.protocol.lower() in _HTTPS_PROTOCOLS:
            return "https"
        return "http"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def management_url(self) -> str:
        return f"{self.base_url}/management"

    @property
    def has_credentials(self) -> bool:
        return self.username is not None and self.password is not None
