"""Concrete goals run against the management endpoint."""

from collections.abc import Mapping
from typing import Any

from mgmt_connect.client import Address, CredentialPrompt, console_prompt
from mgmt_connect.connection import ServerConnection
from mgmt_connect.decryption import SettingsDecrypter
from mgmt_connect.server_settings import ServerSettings
from mgmt_connect.settings import ConnectionParameters

RESERVED_OPERATION_KEYS = frozenset({"operation", "address"})


def validate_operation_params(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """Copy ``params``, rejecting keys that would clash with the operation envelope."""
    params = dict(params or {})
    clashes = sorted(RESERVED_OPERATION_KEYS.intersection(params))
    if clashes:
        raise ValueError(f"Operation parameters may not include reserved keys: {', '.join(clashes)}.")
    return params


class ServerStateGoal(ServerConnection):
    """Report the ``server-state`` attribute of the root resource."""

    def goal(self) -> str:
        return "server-state"

    async def run(self) -> str:
        client = self.create_client()
        try:
            return await client.read_attribute("server-state")
        finally:
            await client.aclose()


class ExecuteOperationGoal(ServerConnection):
    """Execute an arbitrary management operation."""

    def __init__(
        self,
        parameters: ConnectionParameters,
        settings: ServerSettings | None,
        decrypter: SettingsDecrypter | None = None,
        prompt: CredentialPrompt | None = console_prompt,
        *,
        operation: str,
        address: Address = (),
        operation_params: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(parameters, settings, decrypter, prompt)
        self.operation = operation
        self.address = tuple(address)
        self.operation_params = validate_operation_params(operation_params)

    def goal(self) -> str:
        return "execute-operation"

    async def run(self) -> Any:
        client = self.create_client()
        try:
            return await client.execute(self.operation, self.address, **self.operation_params)
        finally:
            await client.aclose()
