from unittest.mock import Mock, create_autospec

import pytest

from Encryption.cipher_initializer import CipherHandle, CipherInitializer
from Encryption.key_property import KeyProperty, reset_key_property

SECRET_KEY = "MySuperSecretKey"
STRING_TO_CIPHER = "ma_chaine_a_chiffrer"
STRING_TO_DECIPHER = "bWFfY2hhaW5lX2FfY2hpZmZyZXI="


@pytest.fixture
def key_property():
    return KeyProperty(SECRET_KEY)


@pytest.fixture
def cipher_initializer():
    return create_autospec(CipherInitializer, instance=True)


@pytest.fixture
def cipher():
    return Mock(spec=CipherHandle)


@pytest.fixture
def identity_do_final():
    """Byte transform stand-in that returns its input unchanged."""
    return Mock(side_effect=lambda cipher, data: data)


@pytest.fixture(autouse=True)
def _fresh_process_key(monkeypatch):
    monkeypatch.delenv("DATABASE_ENCRYPTION_KEY", raising=False)
    reset_key_property()
    yield
    reset_key_property()
