"""
CIPHER INITIALIZER
==================
Builds a ready-to-use block cipher for one encrypt or decrypt call.

FLOW:
- prepare_and_init_cipher(mode, key) parses the configured transformation
  ("AES/CBC/PKCS5Padding"), turns the key into AES key material and sets the IV.
- The returned CipherHandle runs exactly one whole-buffer do_final().

WHY:
- Keeps algorithm selection apart from the string conversion so the byte
  transform can be swapped or doubled independently.

HOW:
- cryptography's Cipher/modes/padding primitives, with failures mapped onto
  the Encryption.errors taxonomy.
"""

from __future__ import annotations

import base64
import binascii
import enum

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from Encryption.encryption_config import ENCRYPTION_SETTINGS
from Encryption.errors import (
    BadPaddingError,
    CipherReuseError,
    IllegalBlockSizeError,
    InvalidAlgorithmParameterError,
    InvalidKeyError,
    NoSuchAlgorithmError,
    NoSuchPaddingError,
)


class CipherMode(enum.Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


_ALGORITHMS = {"AES": algorithms.AES}
_BLOCK_MODES = {"CBC", "ECB"}
_STREAM_MODES = {"CTR"}
_PADDINGS = {"PKCS5PADDING": True, "PKCS7PADDING": True, "NOPADDING": False}
AES_KEY_SIZES = (16, 24, 32)


def parse_transformation(transformation: str) -> tuple[str, str, bool]:
    """Return (algorithm, mode, padded) for "ALG[/MODE/PADDING]"."""
    parts = [part.strip() for part in (transformation or "").split("/")]
    if len(parts) == 1:
        parts += ["ECB", "PKCS5Padding"]
    if len(parts) != 3 or not all(parts):
        raise NoSuchAlgorithmError(f"Invalid transformation format: {transformation!r}")

    algorithm, mode, pad = parts[0].upper(), parts[1].upper(), parts[2].upper()
    if algorithm not in _ALGORITHMS:
        raise NoSuchAlgorithmError(f"Unsupported algorithm: {parts[0]}")
    if mode not in _BLOCK_MODES | _STREAM_MODES:
        raise NoSuchAlgorithmError(f"Unsupported mode: {parts[1]}")
    if pad not in _PADDINGS:
        raise NoSuchPaddingError(f"Unsupported padding: {parts[2]}")
    padded = _PADDINGS[pad]
    if padded and mode in _STREAM_MODES:
        raise NoSuchPaddingError(f"{parts[1]} mode must use NoPadding")
    return algorithm, mode, padded


class CipherHandle:
    """One-shot cipher bound to a single direction."""

    def __init__(self, mode: CipherMode, cipher: Cipher, block_size: int, padded: bool, block_mode: bool):
        self.mode = mode
        self._cipher = cipher
        self._block_size = block_size
        self._padded = padded
        self._block_mode = block_mode
        self._used = False

    @property
    def block_size(self) -> int:
        """Block size in bytes."""
        return self._block_size // 8

    def do_final(self, data: bytes) -> bytes:
        if self._used:
            raise CipherReuseError("Cipher handle already used")
        self._used = True
        if self.mode is CipherMode.ENCRYPT:
            return self._encrypt(data)
        return self._decrypt(data)

    def _encrypt(self, data: bytes) -> bytes:
        if self._padded:
            padder = padding.PKCS7(self._block_size).padder()
            data = padder.update(data) + padder.finalize()
        elif self._block_mode and len(data) % self.block_size:
            raise IllegalBlockSizeError(
                f"Input length not multiple of {self.block_size} bytes"
            )
        encryptor = self._cipher.encryptor()
        return encryptor.update(data) + encryptor.finalize()

    def _decrypt(self, data: bytes) -> bytes:
        if self._block_mode and (len(data) % self.block_size or (self._padded and not data)):
            raise IllegalBlockSizeError(
                f"Input length must be a non-zero multiple of {self.block_size} bytes when decrypting"
            )
        decryptor = self._cipher.decryptor()
        plain = decryptor.update(data) + decryptor.finalize()
        if not self._padded:
            return plain
        unpadder = padding.PKCS7(self._block_size).unpadder()
        try:
            return unpadder.update(plain) + unpadder.finalize()
        except ValueError as exc:
            raise BadPaddingError("Given final block not properly padded") from exc


class CipherInitializer:
    def __init__(self, transformation: str | None = None, iv: str | None = None):
        self.transformation = transformation or ENCRYPTION_SETTINGS["CIPHER_TRANSFORMATION"]
        self.iv = iv if iv is not None else ENCRYPTION_SETTINGS["CIPHER_IV"]

    def prepare_and_init_cipher(self, mode: CipherMode, key: str) -> CipherHandle:
        algorithm_name, mode_name, padded = parse_transformation(self.transformation)
        algorithm = self._secret_key(algorithm_name, key)
        cipher_mode = self._algorithm_parameters(mode_name, algorithm.block_size)
        try:
            cipher = Cipher(algorithm, cipher_mode)
        except ValueError as exc:
            raise InvalidAlgorithmParameterError(str(exc)) from exc
        return CipherHandle(
            mode,
            cipher,
            block_size=algorithm.block_size,
            padded=padded,
            block_mode=mode_name in _BLOCK_MODES,
        )

    def _secret_key(self, algorithm_name: str, key: str):
        if not key:
            raise InvalidKeyError("Empty key")
        material = key.encode("utf-8")
        if len(material) not in AES_KEY_SIZES:
            raise InvalidKeyError(
                f"Invalid AES key length: {len(material)} bytes (expected 16, 24 or 32)"
            )
        try:
            return _ALGORITHMS[algorithm_name](material)
        except ValueError as exc:
            raise InvalidKeyError(str(exc)) from exc

    def _algorithm_parameters(self, mode_name: str, block_size: int):
        iv = self._iv_bytes(block_size)
        if mode_name == "ECB":
            if self.iv:
                raise InvalidAlgorithmParameterError("ECB mode cannot use IV")
            return modes.ECB()
        if len(iv) != block_size // 8:
            raise InvalidAlgorithmParameterError(
                f"Wrong IV length: must be {block_size // 8} bytes long"
            )
        if mode_name == "CBC":
            return modes.CBC(iv)
        return modes.CTR(iv)

    def _iv_bytes(self, block_size: int) -> bytes:
        if not self.iv:
            # Zero IV keeps ciphertext stable for a given key and value.
            return bytes(block_size // 8)
        try:
            return base64.b64decode(self.iv, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidAlgorithmParameterError("IV is not valid base64") from exc


def call_cipher_do_final(cipher: CipherHandle, data: bytes) -> bytes:
    return cipher.do_final(data)
