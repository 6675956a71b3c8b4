import base64

import pytest

from Encryption.cipher_initializer import (
    CipherHandle,
    CipherInitializer,
    CipherMode,
    call_cipher_do_final,
    parse_transformation,
)
from Encryption.errors import (
    BadPaddingError,
    CipherReuseError,
    IllegalBlockSizeError,
    InvalidAlgorithmParameterError,
    InvalidKeyError,
    NoSuchAlgorithmError,
    NoSuchPaddingError,
)
from tests.conftest import SECRET_KEY

PLAIN = "ma_chaine_a_chiffrer".encode("utf-8")
ZERO_IV_16 = base64.b64encode(bytes(16)).decode("ascii")


def _round_trip(initializer, data, key=SECRET_KEY):
    encrypted = initializer.prepare_and_init_cipher(CipherMode.ENCRYPT, key).do_final(data)
    decrypted = initializer.prepare_and_init_cipher(CipherMode.DECRYPT, key).do_final(encrypted)
    return encrypted, decrypted


def test_parse_transformation_defaults_bare_algorithm_to_ecb():
    assert parse_transformation("AES") == ("AES", "ECB", True)
    assert parse_transformation("aes/cbc/pkcs5padding") == ("AES", "CBC", True)
    assert parse_transformation("AES/CTR/NoPadding") == ("AES", "CTR", False)


def test_prepare_returns_handle_bound_to_mode():
    initializer = CipherInitializer("AES/CBC/PKCS5Padding", iv="")

    handle = initializer.prepare_and_init_cipher(CipherMode.ENCRYPT, SECRET_KEY)

    assert isinstance(handle, CipherHandle)
    assert handle.mode is CipherMode.ENCRYPT
    assert handle.block_size == 16


@pytest.mark.parametrize("key", [SECRET_KEY, "k" * 24, "k" * 32])
def test_cbc_round_trip_for_each_aes_key_size(key):
    encrypted, decrypted = _round_trip(CipherInitializer("AES/CBC/PKCS5Padding", iv=""), PLAIN, key)

    assert encrypted != PLAIN
    assert len(encrypted) == 32
    assert decrypted == PLAIN


@pytest.mark.parametrize("transformation", ["AES", "AES/ECB/PKCS5Padding"])
def test_ecb_round_trip(transformation):
    _, decrypted = _round_trip(CipherInitializer(transformation, iv=""), PLAIN)

    assert decrypted == PLAIN


def test_ctr_round_trip_keeps_length():
    encrypted, decrypted = _round_trip(CipherInitializer("AES/CTR/NoPadding", iv=""), PLAIN)

    assert len(encrypted) == len(PLAIN)
    assert decrypted == PLAIN


def test_configured_iv_changes_ciphertext():
    other_iv = base64.b64encode(bytes(range(16))).decode("ascii")

    zero, _ = _round_trip(CipherInitializer("AES/CBC/PKCS5Padding", iv=""), PLAIN)
    custom, decrypted = _round_trip(CipherInitializer("AES/CBC/PKCS5Padding", iv=other_iv), PLAIN)

    assert zero != custom
    assert decrypted == PLAIN


def test_explicit_zero_iv_matches_default():
    default, _ = _round_trip(CipherInitializer("AES/CBC/PKCS5Padding", iv=""), PLAIN)
    explicit, _ = _round_trip(CipherInitializer("AES/CBC/PKCS5Padding", iv=ZERO_IV_16), PLAIN)

    assert default == explicit


@pytest.mark.parametrize("key", ["", "short", "x" * 17])
def test_invalid_key(key):
    initializer = CipherInitializer("AES/CBC/PKCS5Padding", iv="")

    with pytest.raises(InvalidKeyError):
        initializer.prepare_and_init_cipher(CipherMode.ENCRYPT, key)


@pytest.mark.parametrize(
    "transformation",
    ["DES/CBC/PKCS5Padding", "AES/GCM/NoPadding", "AES/CBC", "", "AES//PKCS5Padding"],
)
def test_unsupported_algorithm(transformation):
    initializer = CipherInitializer(transformation, iv="")

    with pytest.raises(NoSuchAlgorithmError):
        initializer.prepare_and_init_cipher(CipherMode.ENCRYPT, SECRET_KEY)


@pytest.mark.parametrize("transformation", ["AES/CBC/ISO10126Padding", "AES/CTR/PKCS5Padding"])
def test_unsupported_padding(transformation):
    initializer = CipherInitializer(transformation, iv="")

    with pytest.raises(NoSuchPaddingError):
        initializer.prepare_and_init_cipher(CipherMode.DECRYPT, SECRET_KEY)


@pytest.mark.parametrize(
    "transformation, iv",
    [
        ("AES/CBC/PKCS5Padding", "AAAAAAAAAAA="),
        ("AES/CBC/PKCS5Padding", "not-base64!"),
        ("AES/ECB/PKCS5Padding", ZERO_IV_16),
    ],
)
def test_invalid_algorithm_parameters(transformation, iv):
    initializer = CipherInitializer(transformation, iv=iv)

    with pytest.raises(InvalidAlgorithmParameterError):
        initializer.prepare_and_init_cipher(CipherMode.ENCRYPT, SECRET_KEY)


def test_handle_is_single_use():
    handle = CipherInitializer("AES/CBC/PKCS5Padding", iv="").prepare_and_init_cipher(CipherMode.ENCRYPT, SECRET_KEY)
    handle.do_final(PLAIN)

    with pytest.raises(CipherReuseError):
        handle.do_final(PLAIN)


@pytest.mark.parametrize("data", [b"", b"x" * 15, b"x" * 17])
def test_decrypt_rejects_partial_blocks(data):
    handle = CipherInitializer("AES/CBC/PKCS5Padding", iv="").prepare_and_init_cipher(CipherMode.DECRYPT, SECRET_KEY)

    with pytest.raises(IllegalBlockSizeError):
        handle.do_final(data)


def test_unpadded_encrypt_rejects_partial_blocks():
    handle = CipherInitializer("AES/CBC/NoPadding", iv="").prepare_and_init_cipher(CipherMode.ENCRYPT, SECRET_KEY)

    with pytest.raises(IllegalBlockSizeError):
        handle.do_final(b"x" * 15)


def test_decrypt_reports_bad_padding():
    # A zero block has no valid PKCS#7 padding once decrypted.
    unpadded = CipherInitializer("AES/CBC/NoPadding", iv="")
    encrypted = unpadded.prepare_and_init_cipher(CipherMode.ENCRYPT, SECRET_KEY).do_final(bytes(16))
    padded = CipherInitializer("AES/CBC/PKCS5Padding", iv="")

    with pytest.raises(BadPaddingError):
        padded.prepare_and_init_cipher(CipherMode.DECRYPT, SECRET_KEY).do_final(encrypted)


def test_call_cipher_do_final_delegates_to_handle(cipher):
    cipher.do_final.return_value = b"out"

    assert call_cipher_do_final(cipher, b"in") == b"out"
    cipher.do_final.assert_called_once_with(b"in")


def test_defaults_come_from_settings(monkeypatch):
    from Encryption import cipher_initializer as module

    monkeypatch.setitem(module.ENCRYPTION_SETTINGS, "CIPHER_TRANSFORMATION", "AES/CTR/NoPadding")
    monkeypatch.setitem(module.ENCRYPTION_SETTINGS, "CIPHER_IV", None)

    initializer = CipherInitializer()

    assert initializer.transformation == "AES/CTR/NoPadding"
    assert initializer.iv is None
