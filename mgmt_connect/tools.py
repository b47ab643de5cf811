"""MCP tool registrations exposing management goals."""

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Awaitable, Callable

from fastmcp import Context, FastMCP
from pydantic import Field

from mgmt_connect.client import CredentialPrompt, ManagementApiError, console_prompt
from mgmt_connect.decryption import DecryptionError
from mgmt_connect.goals import ExecuteOperationGoal, ServerStateGoal, validate_operation_params
from mgmt_connect.server_settings import SettingsFileError
from mgmt_connect.settings import ConnectionParameters

logger = logging.getLogger(__name__)


@dataclass
class GoalDependencies:
    """Runtime dependencies required by the MCP tools."""

    parameters: ConnectionParameters | None = None
    prompt: CredentialPrompt | None = console_prompt

    def attach_parameters(self, parameters: ConnectionParameters) -> None:
        self.parameters = parameters

    def detach_parameters(self) -> None:
        self.parameters = None

    def require_parameters(self) -> ConnectionParameters:
        if self.parameters is None:
            raise RuntimeError("Connection parameters are not initialized.")
        return self.parameters


def register_management_tools(
    mcp: FastMCP,
    dependencies: GoalDependencies,
) -> None:
    """Register MCP tools that run goals against the management endpoint."""

    def _validate_non_empty(value: str, field_name: str) -> str:
        if not value or not value.strip():
            raise ValueError(f"{field_name} must be a non-empty string.")
        return value.strip()

    def _log_tool_event(tool_name: str, event: str, **fields: object) -> None:
        logger.info(
            "management_tool_event",
            extra={"tool": tool_name, "event": event, **fields},
        )

    async def _with_error_handling(
        tool_name: str,
        action: Callable[[], Awaitable[dict[str, Any]]],
    ) -> dict[str, Any]:
        try:
            return await action()
        except (ManagementApiError, DecryptionError, SettingsFileError) as exc:
            logger.warning("%s failed", tool_name, exc_info=True)
            _log_tool_event(tool_name, "error", error=str(exc))
            return {"error": str(exc)}
        except Exception as exc:  # noqa: BLE001
            logger.exception("%s failed unexpectedly", tool_name)
            _log_tool_event(tool_name, "unexpected_error", error=str(exc))
            return {"error": f"Unexpected error: {exc}"}

    @mcp.tool(
        name="read_server_state",
        description="Reads the 'server-state' attribute of the configured server (e.g. 'running', 'reload-required').",
    )
    async def read_server_state(ctx: Context) -> dict[str, Any]:
        """Connect to the management endpoint and report the server state."""

        async def _call() -> dict[str, Any]:
            goal = ServerStateGoal.from_parameters(
                dependencies.require_parameters(),
                prompt=dependencies.prompt,
            )
            state = await goal.run()
            config = goal.client_configuration()
            await ctx.info(f"Server at {config.host}:{config.port} is {state}.")
            _log_tool_event("read_server_state", "success", state=state)
            return {"host": config.host, "port": config.port, "server_state": state}

        return await _with_error_handling("read_server_state", _call)

    @mcp.tool(
        name="execute_management_operation",
        description="Executes a management operation (e.g. 'read-resource') on a resource address and returns its result.",
    )
    async def execute_management_operation(
        operation: Annotated[str, Field(description="The operation name, e.g. 'read-resource' or 'read-attribute'.")],
        address: Annotated[
            list[tuple[str, str]] | None,
            Field(description="Resource address as [key, value] pairs, e.g. [['subsystem', 'logging']]. Empty for the root."),
        ] = None,
        params: Annotated[
            dict[str, Any] | None,
            Field(description="Additional operation parameters, e.g. {'name': 'server-state'}."),
        ] = None,
    ) -> dict[str, Any]:
        """Run an arbitrary operation and return its result."""

        operation_value = _validate_non_empty(operation, "operation")
        params_value = validate_operation_params(params)

        async def _call() -> dict[str, Any]:
            goal = ExecuteOperationGoal.from_parameters(
                dependencies.require_parameters(),
                prompt=dependencies.prompt,
                operation=operation_value,
                address=address or (),
                operation_params=params_value,
            )
            result = await goal.run()
            _log_tool_event("execute_management_operation", "success", operation=operation_value)
            return {"operation": operation_value, "result": result}

        return await _with_error_handling("execute_management_operation", _call)

    logger.info("Management MCP tools registered.")
