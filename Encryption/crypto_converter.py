"""
FIELD CRYPTO CONVERTERS
=======================
Encrypt attribute values on write and decrypt them on read.

FLOW:
- convert_to_database_column(): None/empty pass through, no key passes through,
  otherwise encrypt the UTF-8 bytes and store them as base64.
- convert_to_entity_attribute(): same guards, then base64-decode, decrypt and
  decode UTF-8.

WHY:
- The rest of the app only ever sees plaintext attributes.
- A missing key disables encryption instead of failing. Values written in that
  state are stored in clear, so production must always set the key.

HOW:
- The key is read once per call from an injected KeyProperty.
- The cipher comes from CipherInitializer, the byte transform from an injected
  callable (call_cipher_do_final by default).
- Every crypto failure is re-raised as CryptoConversionError with the original
  error as __cause__.
"""

from __future__ import annotations

import base64
import binascii
import datetime
import threading
from typing import Callable, Generic, Optional, TypeVar

from Encryption.cipher_initializer import CipherHandle, CipherInitializer, CipherMode, call_cipher_do_final
from Encryption.crypto_logging import get_logger
from Encryption.errors import CryptoConversionError, CryptoError
from Encryption.key_property import KeyProperty, get_key_property
from Encryption.metrics import increment_conversion_event

T = TypeVar("T")

CipherDoFinal = Callable[[CipherHandle, bytes], bytes]

_WRAPPED_ERRORS = (CryptoError, binascii.Error, UnicodeError)


class AbstractCryptoConverter(Generic[T]):
    def __init__(
        self,
        cipher_initializer: Optional[CipherInitializer] = None,
        key_property: Optional[KeyProperty] = None,
        cipher_do_final: Optional[CipherDoFinal] = None,
    ):
        self.cipher_initializer = cipher_initializer or CipherInitializer()
        self.key_property = key_property or get_key_property()
        self.cipher_do_final = cipher_do_final or call_cipher_do_final
        self.logger = get_logger()
        self._bypass_warned = False
        self._bypass_lock = threading.Lock()

    # Hooks for the attribute type.

    def is_not_null_or_empty(self, attribute: Optional[T]) -> bool:
        raise NotImplementedError

    def entity_attribute_to_string(self, attribute: Optional[T]) -> Optional[str]:
        raise NotImplementedError

    def string_to_entity_attribute(self, data: Optional[str]) -> Optional[T]:
        raise NotImplementedError

    def convert_to_database_column(self, attribute: Optional[T]) -> Optional[str]:
        if not self.is_not_null_or_empty(attribute):
            return self.entity_attribute_to_string(attribute)

        key = self.key_property.get()
        if not key:
            self._bypass("encrypt")
            return self.entity_attribute_to_string(attribute)

        try:
            cipher = self.cipher_initializer.prepare_and_init_cipher(CipherMode.ENCRYPT, key)
            plain = self.entity_attribute_to_string(attribute).encode("utf-8")
            encrypted = self.cipher_do_final(cipher, plain)
            result = base64.b64encode(encrypted).decode("ascii")
        except _WRAPPED_ERRORS as exc:
            raise self._failure("encrypt", exc) from exc
        increment_conversion_event("encrypt", "success")
        return result

    def convert_to_entity_attribute(self, db_data: Optional[str]) -> Optional[T]:
        if not db_data:
            return self.string_to_entity_attribute(db_data)

        key = self.key_property.get()
        if not key:
            self._bypass("decrypt")
            return self.string_to_entity_attribute(db_data)

        try:
            cipher = self.cipher_initializer.prepare_and_init_cipher(CipherMode.DECRYPT, key)
            encrypted = base64.b64decode(db_data.encode("ascii"), validate=True)
            text = self.cipher_do_final(cipher, encrypted).decode("utf-8")
        except _WRAPPED_ERRORS as exc:
            raise self._failure("decrypt", exc) from exc
        increment_conversion_event("decrypt", "success")
        return self.string_to_entity_attribute(text)

    def _bypass(self, operation: str) -> None:
        increment_conversion_event(operation, "bypass")
        with self._bypass_lock:
            first_bypass = not self._bypass_warned
            self._bypass_warned = True
        if first_bypass:
            self.logger.warning(
                "No database encryption key configured; %s disabled for %s, values are stored in clear",
                operation,
                type(self).__name__,
            )
        self.logger.debug("Bypassing %s: no key", operation)

    def _failure(self, operation: str, exc: BaseException) -> CryptoConversionError:
        increment_conversion_event(operation, "failure")
        self.logger.error(
            "Field %s failed converter=%s cause=%s",
            operation,
            type(self).__name__,
            type(exc).__name__,
        )
        return CryptoConversionError(operation, exc)


class StringCryptoConverter(AbstractCryptoConverter[str]):
    def is_not_null_or_empty(self, attribute):
        return bool(attribute)

    def entity_attribute_to_string(self, attribute):
        return attribute

    def string_to_entity_attribute(self, data):
        return data


class DateCryptoConverter(AbstractCryptoConverter[datetime.date]):
    """Stores dates as ISO text (YYYY-MM-DD)."""

    def is_not_null_or_empty(self, attribute):
        return attribute is not None

    def entity_attribute_to_string(self, attribute):
        return None if attribute is None else attribute.isoformat()

    def string_to_entity_attribute(self, data):
        return datetime.date.fromisoformat(data) if data else None


class DateTimeCryptoConverter(AbstractCryptoConverter[datetime.datetime]):
    """Stores datetimes as ISO 8601 text."""

    def is_not_null_or_empty(self, attribute):
        return attribute is not None

    def entity_attribute_to_string(self, attribute):
        return None if attribute is None else attribute.isoformat()

    def string_to_entity_attribute(self, data):
        return datetime.datetime.fromisoformat(data) if data else None
