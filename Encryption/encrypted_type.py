"""
ENCRYPTED SQLALCHEMY TYPES
==========================
Field-level encryption for SQLAlchemy columns through the crypto converters.
"""

# FLOW:
# - Encrypt on bind (write) and decrypt on result (read).
# - Uses DATABASE_ENCRYPTION_KEY through the process-wide KeyProperty
#   unless a converter is passed in.
# WHY:
# - Ensures sensitive fields are encrypted at rest transparently.
# HOW:
# - SQLAlchemy TypeDecorator wraps String/Text columns.

from __future__ import annotations

from sqlalchemy.types import String, Text, TypeDecorator

from Encryption.crypto_converter import (
    DateCryptoConverter,
    DateTimeCryptoConverter,
    StringCryptoConverter,
)


class _ConverterType(TypeDecorator):
    impl = String
    cache_ok = True
    converter_class = StringCryptoConverter

    def __init__(self, *args, converter=None, **kwargs):
        super().__init__(*args, **kwargs)
        # Injected converter; also part of the SQLAlchemy cache key.
        self.converter = converter
        self._active_converter = None

    def _get_converter(self):
        if self.converter is not None:
            return self.converter
        if self._active_converter is None:
            self._active_converter = self.converter_class()
        return self._active_converter

    def process_bind_param(self, value, dialect):
        return self._get_converter().convert_to_database_column(value)

    def process_result_value(self, value, dialect):
        return self._get_converter().convert_to_entity_attribute(value)


class EncryptedString(_ConverterType):
    impl = String
    cache_ok = True

    def __init__(self, length=None, converter=None, **kwargs):
        super().__init__(converter=converter, **kwargs)
        self.length = length

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(String(self.length))


class EncryptedText(_ConverterType):
    impl = Text
    cache_ok = True


class EncryptedDate(_ConverterType):
    impl = String(64)
    cache_ok = True
    converter_class = DateCryptoConverter


class EncryptedDateTime(_ConverterType):
    impl = String(128)
    cache_ok = True
    converter_class = DateTimeCryptoConverter
