"""
Connect goals to a running application server's management endpoint.

Credentials come from explicit parameters, then the settings file, then an
interactive prompt when the server asks for them.
"""

from mgmt_connect.config import ConnectionConfig
from mgmt_connect.connection import ServerConnection
from mgmt_connect.resolver import CredentialResolver, Credentials

__all__ = ["ConnectionConfig", "CredentialResolver", "Credentials", "ServerConnection"]
