"""Return codes and the exceptions raised for them."""

from __future__ import annotations

import enum


class ReturnCode(enum.IntEnum):
    """High-level result codes for volume and crypto operations."""

    SUCCESS = 0
    ERROR_ALLOC = -1
    ERROR_FILE_OPEN = -2
    ERROR_FILE_CLOSE = -3
    ERROR_FILE_READ = -4
    ERROR_FILE_WRITE = -5
    ERROR_FILE_SEEK = -6

    ERROR_VOLUME_NOT_GIVEN = -10
    ERROR_VOLUME_HEADER_READ = -11
    ERROR_VOLUME_HEADER_CHECK = -12
    ERROR_VOLUME_SIZE_NOT_FOUND = -13
    ERROR_VOLUME_STATE_NOT_SAFE = -14
    ERROR_VOLUME_READ_ONLY = -15

    ERROR_METADATA_OFFSET = -20
    ERROR_METADATA_CHECK = -21
    ERROR_METADATA_VERSION_UNSUPPORTED = -22
    ERROR_METADATA_FILE_SIZE_NOT_FOUND = -23
    ERROR_METADATA_FILE_OVERWRITE = -24
    ERROR_DATASET_CHECK = -25
    ERROR_VMK_RETRIEVAL = -26
    ERROR_FVEK_RETRIEVAL = -27
    ERROR_VIRTUALIZATION_INFO_DATUM_NOT_FOUND = -28

    ERROR_CRYPTO_INIT = -40
    ERROR_CRYPTO_ALGORITHM_UNSUPPORTED = -41

    ERROR_MUTEX_INIT = -50
    ERROR_MUTEX_LOCK = -51
    ERROR_MUTEX_UNLOCK = -52

    ERROR_OFFSET_OUT_OF_BOUND = -60

    ERROR_DISLOCKER_NOT_INITIALIZED = -100
    ERROR_DISLOCKER_ENCRYPTION_ERROR = -101
    ERROR_DISLOCKER_NO_WRITE_ON_METADATA = -102
    ERROR_DISLOCKER_INVAL = -103


class DislockerError(Exception):
    """Base error; carries a message and a ReturnCode."""

    default_code: ReturnCode | None = None

    def __init__(self, message: str, code: ReturnCode | int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is None:
            self.code = self.default_code
        else:
            self.code = ReturnCode(code)


class InvalidArgumentError(DislockerError, ValueError):
    """An argument given to an operation is not acceptable."""

    default_code = ReturnCode.ERROR_DISLOCKER_INVAL


class AlgorithmUnsupportedError(DislockerError):
    """The requested cipher algorithm is not supported."""

    default_code = ReturnCode.ERROR_CRYPTO_ALGORITHM_UNSUPPORTED


class KeyDecryptionError(DislockerError):
    """A key could not be decrypted: the authentication tags do not match."""

    default_code = ReturnCode.ERROR_DISLOCKER_ENCRYPTION_ERROR