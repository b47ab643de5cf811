import pytest

from mgmt_connect.decryption import DecryptionError, SettingsDecrypter, is_encrypted
from mgmt_connect.server_settings import CredentialRecord


def test_encrypted_value_is_braced(decrypter: SettingsDecrypter) -> None:
    value = decrypter.encrypt("p")

    assert is_encrypted(value)
    assert decrypter.decrypt_value(value) == "p"


def test_decrypt_returns_copy_with_plain_password(decrypter: SettingsDecrypter) -> None:
    record = CredentialRecord(id="srv1", username="u", password=decrypter.encrypt("p"))

    decrypted = decrypter.decrypt(record)

    assert decrypted == CredentialRecord(id="srv1", username="u", password="p")
    assert record.password != "p"


@pytest.mark.parametrize("value", [None, "", "plain", "{}", "{unterminated"])
def test_unencrypted_values_pass_through(value: str | None) -> None:
    assert SettingsDecrypter().decrypt_value(value) == value


def test_corrupted_token_raises(decrypter: SettingsDecrypter) -> None:
    with pytest.raises(DecryptionError):
        decrypter.decrypt_value("{not-a-token}")


def test_invalid_key_raises_when_first_needed() -> None:
    decrypter = SettingsDecrypter("too-short")

    assert decrypter.decrypt_value("plain") == "plain"
    with pytest.raises(DecryptionError) as exc:
        decrypter.decrypt_value("{gAAAAABtoken}")
    assert "Fernet key" in str(exc.value)
