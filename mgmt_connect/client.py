"""
Management API client wrapper for the server's HTTP management interface.

Operations are posted as JSON to ``/management`` and answered with an
``outcome`` envelope. Credentials the resolver could not supply are asked for
when the server first challenges the request.
"""

import asyncio
import getpass
import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from mgmt_connect.config import ConnectionConfig
from mgmt_connect.http_client import create_management_client

logger = logging.getLogger(__name__)

MANAGEMENT_PATH = "/management"

CredentialPrompt = Callable[[str | None], tuple[str, str]]
Address = Sequence[tuple[str, str]]


class ManagementApiError(RuntimeError):
    """Represents failures when communicating with the management endpoint."""


def console_prompt(username: str | None) -> tuple[str, str]:
    """Ask for whichever credentials are missing on the terminal."""
    if username is None:
        username = input("Username: ").strip()
    password = getpass.getpass(f"Password for {username}: ")
    return username, password


def _format_address(address: Address) -> list[dict[str, str]]:
    return [{key: value} for key, value in address]


@dataclass(slots=True)
class ManagementClient:
    """Typed wrapper around the shared AsyncClient."""

    _client: httpx.AsyncClient
    _username: str | None = None
    _prompt: CredentialPrompt | None = None

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        prompt: CredentialPrompt | None = None,
    ) -> "ManagementClient":
        """Factory that builds the client from a resolved ConnectionConfig."""
        return cls(create_management_client(config), config.username, prompt)

    async def aclose(self) -> None:
        """Close the underlying HTTP resources."""
        await self._client.aclose()

    async def execute(self, operation: str, address: Address = (), **params: Any) -> Any:
        """Run a management operation and return its ``result``."""
        if not operation or not operation.strip():
            raise ValueError("operation must be a non-empty string.")
        payload: dict[str, Any] = {
            "operation": operation.strip(),
            "address": _format_address(address),
            **params,
        }
        logger.debug(
            "Executing management operation",
            extra={"operation": payload["operation"], "address": payload["address"]},
        )
        data = await self._request(payload)
        if data.get("outcome") != "success":
            raise ManagementApiError(
                f"Operation {payload['operation']} failed: "
                f"{data.get('failure-description', 'no failure description provided.')}"
            )
        return data.get("result")

    async def read_attribute(self, name: str, address: Address = ()) -> Any:
        """Read a single attribute of a management resource."""
        return await self.execute("read-attribute", address, name=name)

    async def _authenticate(self) -> None:
        if self._prompt is None:
            raise ManagementApiError(
                "Management endpoint requires authentication and no credentials were resolved."
            )
        logger.info("Management endpoint requested authentication; prompting for credentials")
        username, password = await asyncio.to_thread(self._prompt, self._username)
        self._username = username
        self._client.auth = httpx.DigestAuth(username, password)

    async def _send(self, payload: dict[str, Any]) -> httpx.Response:
        try:
            return await self._client.post(MANAGEMENT_PATH, json=payload)
        except httpx.TimeoutException as exc:
            logger.error("Management request timed out", exc_info=exc)
            raise ManagementApiError(
                f"Management request timed out ({payload['operation']})."
            ) from exc
        except httpx.RequestError as exc:
            logger.error("Management request failed", exc_info=exc)
            raise ManagementApiError(
                f"Management request failed ({payload['operation']}): {exc!s}"
            ) from exc

    async def _request(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Normalized request handler for all outgoing management calls."""
        response = await self._send(payload)
        if response.status_code == 401 and self._client.auth is None:
            # Answering the challenge, not a retry.
            await self._authenticate()
            response = await self._send(payload)

        if response.status_code == 401:
            raise ManagementApiError("Management endpoint rejected the supplied credentials.")

        try:
            data: dict[str, Any] = response.json()
        except json.JSONDecodeError as exc:
            if response.is_error:
                snippet = response.text.strip()
                if len(snippet) > 512:
                    snippet = f"{snippet[:512]}..."
                logger.warning(
                    "Management endpoint responded with error",
                    extra={"status_code": response.status_code, "content": snippet},
                )
                raise ManagementApiError(
                    f"Management endpoint error ({response.status_code}): {snippet or 'no body provided.'}"
                ) from exc
            logger.error("Management endpoint returned invalid JSON")
            raise ManagementApiError("Management endpoint returned invalid JSON.") from exc

        if not isinstance(data, dict):
            raise ManagementApiError("Management endpoint returned an unexpected payload.")
        return data
