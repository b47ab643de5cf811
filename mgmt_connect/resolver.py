"""Credential precedence for management connections.

Explicit parameters win. Otherwise the server id is looked up in the settings
file and its password decrypted. Failing both, no credentials are returned and
the transport prompts when the server asks for them.
"""

import logging
from typing import NamedTuple

from mgmt_connect.decryption import SettingsDecrypter
from mgmt_connect.server_settings import ServerSettings

logger = logging.getLogger(__name__)

DEBUG_MESSAGE_NO_CREDS = "No username and password in the settings file - falling back to interactive entry"
DEBUG_MESSAGE_NO_ID = "No server id was supplied - getting credentials from interactive entry"
DEBUG_MESSAGE_NO_SERVER_SECTION = "No <server> section was found for the specified id"
DEBUG_MESSAGE_NO_SETTINGS_FILE = "No settings file was found for this invocation"
DEBUG_MESSAGE_PARAMS_HAVE_CREDS = "Getting credentials from the connection parameters"
DEBUG_MESSAGE_SETTINGS_HAS_CREDS = "Found username and password in the settings file"
DEBUG_MESSAGE_SETTINGS_HAS_ID = "Found the server's id in the settings file"


class Credentials(NamedTuple):
    username: str | None
    password: str | None


class CredentialResolver:
    """Resolves the username and password for a single connection."""

    def __init__(self, decrypter: SettingsDecrypter | None = None) -> None:
        self._decrypter = decrypter or SettingsDecrypter()

    def resolve(
        self,
        username: str | None,
        password: str | None,
        server_id: str | None,
        settings: ServerSettings | None,
    ) -> Credentials:
        # A lone username or password still counts as explicit; nothing is merged.
        if username is not None or password is not None:
            logger.debug(DEBUG_MESSAGE_PARAMS_HAVE_CREDS)
            return Credentials(username, password)

        if server_id is None:
            logger.debug(DEBUG_MESSAGE_NO_ID)
            return Credentials(None, None)
        if settings is None:
            logger.debug(DEBUG_MESSAGE_NO_SETTINGS_FILE)
            return Credentials(None, None)

        record = settings.get_server(server_id)
        if record is None:
            logger.debug(DEBUG_MESSAGE_NO_SERVER_SECTION)
            return Credentials(None, None)

        logger.debug(DEBUG_MESSAGE_SETTINGS_HAS_ID)
        record = self._decrypter.decrypt(record)
        if record.username is not None and record.password is not None:
            logger.debug(DEBUG_MESSAGE_SETTINGS_HAS_CREDS)
        else:
            logger.debug(DEBUG_MESSAGE_NO_CREDS)
        return Credentials(record.username, record.password)
