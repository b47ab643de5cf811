"""
Core server bootstrap for the management connection MCP server.

Wires up the fastmcp instance and registers the goal tools.
"""

import logging

from fastmcp import FastMCP  # type: ignore[import-not-found]

from mgmt_connect.client import CredentialPrompt, console_prompt
from mgmt_connect.settings import ConnectionParameters
from mgmt_connect.tools import GoalDependencies, register_management_tools


class ServerApp:
    """Server container holding the parameters every goal invocation starts from."""

    def __init__(
        self,
        parameters: ConnectionParameters,
        prompt: CredentialPrompt | None = console_prompt,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._parameters = parameters
        self._tool_dependencies = GoalDependencies(prompt=prompt)
        self._mcp_app = FastMCP(
            name="Management Connection MCP Server",
            instructions=(
                "Inspect and operate a running application server through its management endpoint."
            ),
            port=parameters.mcp_sse_port,
        )
        register_management_tools(self._mcp_app, self._tool_dependencies)

    def startup(self) -> None:
        """Prepare resources required to launch the SSE server."""
        self._logger.info(
            "Starting server bootstrap",
            extra={"hostname": self._parameters.hostname, "port": self._parameters.port},
        )
        self._tool_dependencies.attach_parameters(self._parameters)

    def shutdown(self) -> None:
        """Release acquired resources."""
        self._logger.info("Shutting down server bootstrap")
        self._tool_dependencies.detach_parameters()

    def serve_forever(self) -> None:
        """Run the FastMCP SSE server until interrupted."""
        host = "0.0.0.0"
        port = self._parameters.mcp_sse_port
        self._logger.info("Starting SSE transport", extra={"host": host, "port": port})
        self._mcp_app.run(transport="sse", host=host, port=port)

    async def serve_sse_async(self, host: str = "0.0.0.0") -> None:
        """Async helper for running the SSE transport (used by smoke tests)."""
        await self._mcp_app.run_http_async(
            transport="sse",
            host=host,
            port=self._parameters.mcp_sse_port,
        )

    @property
    def mcp(self) -> FastMCP:
        """Expose the configured FastMCP instance."""
        return self._mcp_app


def build_server(
    parameters: ConnectionParameters,
    prompt: CredentialPrompt | None = console_prompt,
) -> ServerApp:
    """Factory used by main.py to create the configured server instance."""
    return ServerApp(parameters, prompt)
