import json
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from mgmt_connect import client as client_module
from mgmt_connect.config import ConnectionConfig
from mgmt_connect.decryption import SettingsDecrypter
from mgmt_connect.server import ServerApp, build_server
from mgmt_connect.settings import ConnectionParameters
from mgmt_connect.tools import GoalDependencies


@pytest.fixture
def endpoint(monkeypatch: pytest.MonkeyPatch) -> list[ConnectionConfig]:
    configs: list[ConnectionConfig] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content.decode())
        if payload["operation"] == "read-attribute":
            return httpx.Response(200, json={"outcome": "success", "result": "running"})
        if payload["operation"] == "read-resource":
            return httpx.Response(200, json={"outcome": "success", "result": {"address": payload["address"]}})
        return httpx.Response(
            500,
            json={"outcome": "failed", "failure-description": f"WFLYCTL0031: No operation named '{payload['operation']}'"},
        )

    def factory(config: ConnectionConfig) -> httpx.AsyncClient:
        configs.append(config)
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=config.base_url)

    monkeypatch.setattr(client_module, "create_management_client", factory)
    return configs


def _started_server(parameters: ConnectionParameters) -> ServerApp:
    server = build_server(parameters, prompt=None)
    server.startup()
    return server


def _payload(result: Any) -> dict[str, Any]:
    return json.loads(result.content[0].text)


def test_dependencies_require_parameters() -> None:
    dependencies = GoalDependencies(prompt=None)

    with pytest.raises(RuntimeError):
        dependencies.require_parameters()

    params = ConnectionParameters(hostname="mgmt.internal")
    dependencies.attach_parameters(params)
    assert dependencies.require_parameters() is params

    dependencies.detach_parameters()
    assert dependencies.parameters is None


@pytest.mark.anyio
async def test_read_server_state_builds_fresh_goal_per_call(endpoint: list[ConnectionConfig], tmp_path: Path) -> None:
    server = _started_server(
        ConnectionParameters(username="admin", password="secret", settings_file=tmp_path / "settings.xml")
    )

    async with Client(server.mcp) as client:
        first = _payload(await client.call_tool("read_server_state", {}))
        second = _payload(await client.call_tool("read_server_state", {}))

    assert first == {"host": "localhost", "port": 9990, "server_state": "running"}
    assert second == first
    assert len(endpoint) == 2
    assert endpoint[0] == endpoint[1]
    assert endpoint[0] is not endpoint[1]
    server.shutdown()


@pytest.mark.anyio
async def test_execute_management_operation_success(endpoint: list[ConnectionConfig], tmp_path: Path) -> None:
    server = _started_server(ConnectionParameters(settings_file=tmp_path / "settings.xml"))

    async with Client(server.mcp) as client:
        result = _payload(
            await client.call_tool(
                "execute_management_operation",
                {"operation": "read-resource", "address": [["subsystem", "logging"]]},
            )
        )

    assert result == {"operation": "read-resource", "result": {"address": [{"subsystem": "logging"}]}}
    server.shutdown()


@pytest.mark.anyio
async def test_failed_outcome_is_reported_as_error(endpoint: list[ConnectionConfig], tmp_path: Path) -> None:
    server = _started_server(ConnectionParameters(settings_file=tmp_path / "settings.xml"))

    async with Client(server.mcp) as client:
        result = _payload(await client.call_tool("execute_management_operation", {"operation": "bogus"}))

    assert "No operation named 'bogus'" in result["error"]
    server.shutdown()


@pytest.mark.anyio
async def test_decryption_failure_is_reported_as_error(endpoint: list[ConnectionConfig], tmp_path: Path) -> None:
    settings_file = tmp_path / "settings.xml"
    encrypted = SettingsDecrypter(SettingsDecrypter.generate_key()).encrypt("secret")
    settings_file.write_text(
        f"<settings><servers><server><id>prod</id><username>admin</username><password>{encrypted}</password>"
        "</server></servers></settings>",
        encoding="utf-8",
    )
    server = _started_server(
        ConnectionParameters(
            server_id="prod",
            settings_file=settings_file,
            settings_key=SettingsDecrypter.generate_key(),
        )
    )

    async with Client(server.mcp) as client:
        result = _payload(await client.call_tool("read_server_state", {}))

    assert "Unable to decrypt password" in result["error"]
    assert endpoint == []
    server.shutdown()


@pytest.mark.anyio
async def test_malformed_settings_file_is_reported_as_error(endpoint: list[ConnectionConfig], tmp_path: Path) -> None:
    settings_file = tmp_path / "settings.xml"
    settings_file.write_text("<settings><servers>", encoding="utf-8")
    server = _started_server(ConnectionParameters(server_id="prod", settings_file=settings_file))

    async with Client(server.mcp) as client:
        result = _payload(await client.call_tool("read_server_state", {}))

    assert "not valid XML" in result["error"]
    server.shutdown()


@pytest.mark.anyio
async def test_reserved_params_are_rejected(endpoint: list[ConnectionConfig], tmp_path: Path) -> None:
    server = _started_server(ConnectionParameters(settings_file=tmp_path / "settings.xml"))

    async with Client(server.mcp) as client:
        with pytest.raises(ToolError):
            await client.call_tool(
                "execute_management_operation",
                {"operation": "add", "params": {"address": "x"}},
            )

    assert endpoint == []
    server.shutdown()
