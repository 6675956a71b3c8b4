"""
FEATURE: FIELD ENCRYPTION
"""

# FLOW:
# - Re-export key holder, cipher initializer, converters and SQLAlchemy types.
# WHY:
# - Single import point for models and configuration code.
# HOW:
# - Re-exports from the Encryption modules.

from Encryption.cipher_initializer import CipherHandle, CipherInitializer, CipherMode, call_cipher_do_final
from Encryption.crypto_converter import (
    AbstractCryptoConverter,
    DateCryptoConverter,
    DateTimeCryptoConverter,
    StringCryptoConverter,
)
from Encryption.encrypted_type import EncryptedDate, EncryptedDateTime, EncryptedString, EncryptedText
from Encryption.errors import (
    BadPaddingError,
    CipherConfigurationError,
    CipherReuseError,
    CipherTransformError,
    CryptoConversionError,
    CryptoError,
    IllegalBlockSizeError,
    InvalidAlgorithmParameterError,
    InvalidKeyError,
    NoSuchAlgorithmError,
    NoSuchPaddingError,
)
from Encryption.key_property import KeyProperty, get_key_property, reset_key_property

__all__ = [
    "AbstractCryptoConverter",
    "BadPaddingError",
    "CipherConfigurationError",
    "CipherHandle",
    "CipherInitializer",
    "CipherMode",
    "CipherReuseError",
    "CipherTransformError",
    "CryptoConversionError",
    "CryptoError",
    "DateCryptoConverter",
    "DateTimeCryptoConverter",
    "EncryptedDate",
    "EncryptedDateTime",
    "EncryptedString",
    "EncryptedText",
    "IllegalBlockSizeError",
    "InvalidAlgorithmParameterError",
    "InvalidKeyError",
    "KeyProperty",
    "NoSuchAlgorithmError",
    "NoSuchPaddingError",
    "StringCryptoConverter",
    "call_cipher_do_final",
    "get_key_property",
    "reset_key_property",
]
