"""Base class for goals that connect to a running server's management endpoint."""

import logging
from abc import ABC, abstractmethod
from typing import Any, TypeVar

from mgmt_connect.client import CredentialPrompt, ManagementClient, console_prompt
from mgmt_connect.config import ConnectionConfig
from mgmt_connect.decryption import SettingsDecrypter
from mgmt_connect.resolver import CredentialResolver
from mgmt_connect.server_settings import ServerSettings
from mgmt_connect.settings import ConnectionParameters

logger = logging.getLogger(__name__)

_ConnectionT = TypeVar("_ConnectionT", bound="ServerConnection")


class ServerConnection(ABC):
    """
    Connection plumbing shared by every goal.

    The client configuration is resolved on first use and reused for the rest
    of the invocation, so credentials are looked up and decrypted at most once.
    """

    def __init__(
        self,
        parameters: ConnectionParameters,
        settings: ServerSettings | None,
        decrypter: SettingsDecrypter | None = None,
        prompt: CredentialPrompt | None = console_prompt,
    ) -> None:
        self._parameters = parameters
        self._settings = settings
        self._resolver = CredentialResolver(decrypter)
        self._prompt = prompt
        self._client_configuration: ConnectionConfig | None = None

    @classmethod
    def from_parameters(
        cls: type[_ConnectionT],
        parameters: ConnectionParameters,
        **kwargs: Any,
    ) -> _ConnectionT:
        """Build a goal, loading the settings file and key named by ``parameters``."""
        settings = ServerSettings.load(parameters.settings_file)
        decrypter = SettingsDecrypter(parameters.settings_key)
        return cls(parameters, settings, decrypter, **kwargs)

    @property
    def parameters(self) -> ConnectionParameters:
        return self._parameters

    @abstractmethod
    def goal(self) -> str:
        """The name of the goal being run."""

    def create_client(self) -> ManagementClient:
        return ManagementClient.from_config(self.client_configuration(), self._prompt)

    def client_configuration(self) -> ConnectionConfig:
        """Return the configuration for this invocation, resolving it on first call."""
        if self._client_configuration is not None:
            return self._client_configuration

        params = self._parameters
        username, password = self._resolver.resolve(
            params.username,
            params.password,
            params.server_id,
            self._settings,
        )
        self._client_configuration = ConnectionConfig(
            protocol=params.protocol,
            host=params.hostname,
            port=params.port,
            timeout=params.timeout,
            username=username,
            password=password,
        )
        logger.debug(
            "Resolved client configuration",
            extra={
                "goal": self.goal(),
                "url": self._client_configuration.management_url,
                "authenticated": self._client_configuration.has_credentials,
            },
        )
        return self._client_configuration
