"""
ENCRYPTION ERRORS
=================
Failure kinds raised while preparing or running a field cipher.
"""

# FLOW:
# - CipherInitializer raises CipherConfigurationError subclasses.
# - CipherHandle.do_final() raises CipherTransformError subclasses.
# - Converters wrap both into CryptoConversionError.
# WHY:
# - Callers catch one error type and inspect __cause__ for the kind.
# HOW:
# - Plain exception hierarchy, chained with `raise ... from exc`.

from __future__ import annotations


class CryptoError(Exception):
    """Base class for cipher preparation and transform failures."""


class CipherConfigurationError(CryptoError):
    pass


class InvalidKeyError(CipherConfigurationError):
    pass


class NoSuchAlgorithmError(CipherConfigurationError):
    pass


class NoSuchPaddingError(CipherConfigurationError):
    pass


class InvalidAlgorithmParameterError(CipherConfigurationError):
    pass


class CipherTransformError(CryptoError):
    pass


class BadPaddingError(CipherTransformError):
    pass


class IllegalBlockSizeError(CipherTransformError):
    pass


class CipherReuseError(CipherTransformError):
    """A cipher handle is single-use; do_final() was called twice."""


class CryptoConversionError(RuntimeError):
    """Uniform, non-recoverable failure of one column conversion.

    The original failure is always available as ``__cause__``.
    """

    def __init__(self, operation: str, cause: BaseException | None = None):
        self.operation = operation
        detail = type(cause).__name__ if cause is not None else "unknown"
        super().__init__(f"Field {operation} failed ({detail})")
        self.__cause__ = cause
