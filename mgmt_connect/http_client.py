"""HTTP client factory for the management endpoint."""

import httpx

from mgmt_connect.config import ConnectionConfig


def create_management_client(config: ConnectionConfig) -> httpx.AsyncClient:
    """
    Build an AsyncClient pointed at the management endpoint.

    Digest auth is attached up front only when both credentials are known;
    otherwise authentication is negotiated by the caller on the first 401.
    """
    auth = httpx.DigestAuth(config.username, config.password) if config.has_credentials else None
    return httpx.AsyncClient(
        base_url=config.base_url,
        timeout=float(config.timeout),
        auth=auth,
        headers={"Accept": "application/json"},
    )
