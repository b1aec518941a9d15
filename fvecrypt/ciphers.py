"""Cipher identifiers used in volume metadata."""

from __future__ import annotations

import enum


class CipherType(enum.IntEnum):
    """Cipher and key-protection identifiers."""

    STRETCH_KEY = 0x1000
    AES_CCM_256_0 = 0x2000
    AES_CCM_256_1 = 0x2001
    EXTERN_KEY = 0x2002
    VMK = 0x2003
    AES_CCM_256_2 = 0x2004
    HASH_256 = 0x2005

    AES_128_DIFFUSER = 0x8000
    AES_256_DIFFUSER = 0x8001
    AES_128_NO_DIFFUSER = 0x8002
    AES_256_NO_DIFFUSER = 0x8003
    AES_XTS_128 = 0x8004
    AES_XTS_256 = 0x8005

    def is_supported_disk_cipher(self) -> bool:
        """Whether this cipher can be used for volume data."""
        return LOWEST_SUPPORTED_DISK_CIPHER <= self <= HIGHEST_SUPPORTED_DISK_CIPHER

    def uses_diffuser(self) -> bool:
        """Whether sectors are processed with the Elephant diffuser."""
        return self in (CipherType.AES_128_DIFFUSER, CipherType.AES_256_DIFFUSER)

    def is_xts(self) -> bool:
        """Whether sectors are processed with AES-XTS."""
        return self in (CipherType.AES_XTS_128, CipherType.AES_XTS_256)


LOWEST_SUPPORTED_DISK_CIPHER = CipherType.AES_128_DIFFUSER
HIGHEST_SUPPORTED_DISK_CIPHER = CipherType.AES_XTS_256