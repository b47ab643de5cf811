"""Environment-driven connection parameters for management goals."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_HOSTNAME = "localhost"
DEFAULT_PORT = 9990
DEFAULT_TIMEOUT = 60
DEFAULT_SETTINGS_FILE = Path("~/.mgmt/settings.xml")


def _optional(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip() or str(default)
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be greater than zero.")
    return value


@dataclass(frozen=True, slots=True)
class ConnectionParameters:
    """Parameters shared by every goal that talks to a management endpoint."""

    protocol: str | None = None
    hostname: str = DEFAULT_HOSTNAME
    port: int = DEFAULT_PORT
    server_id: str | None = None
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    timeout: int = DEFAULT_TIMEOUT
    settings_file: Path = DEFAULT_SETTINGS_FILE
    settings_key: str | None = field(default=None, repr=False)
    mcp_sse_port: int = 8000

    @classmethod
    def load(cls) -> "ConnectionParameters":
        """
        Load parameters from environment variables.

        Python-dotenv is used so a local .env file can hold the connection
        details without exporting them globally. Blank values count as unset.
        """
        load_dotenv()

        settings_file_raw = _optional("MGMT_SETTINGS_FILE")
        settings_file = Path(settings_file_raw) if settings_file_raw else DEFAULT_SETTINGS_FILE

        return cls(
            protocol=_optional("MGMT_PROTOCOL"),
            hostname=_optional("MGMT_HOSTNAME") or DEFAULT_HOSTNAME,
            port=_positive_int("MGMT_PORT", DEFAULT_PORT),
            server_id=_optional("MGMT_ID"),
            username=_optional("MGMT_USERNAME"),
            password=_optional("MGMT_PASSWORD"),
            timeout=_positive_int("MGMT_TIMEOUT", DEFAULT_TIMEOUT),
            settings_file=settings_file.expanduser(),
            settings_key=_optional("MGMT_SETTINGS_KEY"),
            mcp_sse_port=_positive_int("MCP_SSE_PORT", 8000),
        )
