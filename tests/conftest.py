import pytest
from cryptography.fernet import Fernet

from mgmt_connect.decryption import SettingsDecrypter
from mgmt_connect.server_settings import CredentialRecord, ServerSettings


@pytest.fixture
def settings_key() -> str:
    return Fernet.generate_key().decode("ascii")


@pytest.fixture
def decrypter(settings_key: str) -> SettingsDecrypter:
    return SettingsDecrypter(settings_key)


@pytest.fixture
def server_settings(decrypter: SettingsDecrypter) -> ServerSettings:
    return ServerSettings(
        {"srv1": CredentialRecord(id="srv1", username="u", password=decrypter.encrypt("p"))}
    )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
