"""Sector, key and checksum cryptography used by BitLocker-encrypted volumes."""

__version__ = "0.1.0"
__all__ = ["ccm", "ciphers", "crc32", "diffuser", "errors", "sectors", "xts"]