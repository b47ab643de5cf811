"""Server credential records read from a settings XML file."""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


class SettingsFileError(ValueError):
    """Raised when a settings file exists but cannot be parsed."""


@dataclass(frozen=True, slots=True)
class CredentialRecord:
    """A <server> entry. The password may still be encrypted."""

    id: str
    username: str | None = None
    password: str | None = field(default=None, repr=False)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> str | None:
    for child in element:
        if _local_name(child.tag) == name:
            text = (child.text or "").strip()
            return text or None
    return None


@dataclass(slots=True)
class ServerSettings:
    """Keyed store of server credential records."""

    servers: dict[str, CredentialRecord] = field(default_factory=dict)

    def get_server(self, server_id: str) -> CredentialRecord | None:
        return self.servers.get(server_id)

    @classmethod
    def from_xml(cls, document: str) -> "ServerSettings":
        """Parse the text of a settings file."""
        try:
            root = ET.fromstring(document)
        except ET.ParseError as exc:
            raise SettingsFileError(f"Settings file is not valid XML: {exc}") from exc

        servers: dict[str, CredentialRecord] = {}
        for element in root.iter():
            if _local_name(element.tag) != "server":
                continue
            server_id = _child_text(element, "id")
            if server_id is None:
                logger.warning("Skipping <server> entry without an <id>")
                continue
            servers[server_id] = CredentialRecord(
                id=server_id,
                username=_child_text(element, "username"),
                password=_child_text(element, "password"),
            )
        return cls(servers)

    @classmethod
    def load(cls, path: Path) -> "ServerSettings | None":
        """Read a settings file, returning None when it does not exist."""
        if not path.is_file():
            logger.debug("Settings file not found", extra={"path": str(path)})
            return None
        settings = cls.from_xml(path.read_text(encoding="utf-8"))
        logger.debug(
            "Loaded settings file",
            extra={"path": str(path), "servers": len(settings.servers)},
        )
        return settings
