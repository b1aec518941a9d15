"""Sector-level encryption and decryption of volume data."""

from __future__ import annotations

import enum

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from fvecrypt.ciphers import CipherType
from fvecrypt.diffuser import (
    diffuser_a_decrypt,
    diffuser_a_encrypt,
    diffuser_b_decrypt,
    diffuser_b_encrypt,
)
from fvecrypt.errors import (
    AlgorithmUnsupportedError,
    DislockerError,
    InvalidArgumentError,
    ReturnCode,
)
from fvecrypt.xts import aes_crypt_xts

BytesLike = bytes | bytearray | memoryview

_BLOCK_SIZE = 16
_SECTOR_KEY_SIZE = 32
_MAX_SECTOR_SIZE = 0xFFFF

# For each algorithm: where the data key and the tweak key sit in the FVEK.
_KEY_LAYOUT: dict[CipherType, tuple[slice, slice | None]] = {
    CipherType.AES_128_DIFFUSER: (slice(0x00, 0x10), slice(0x20, 0x30)),
    CipherType.AES_128_NO_DIFFUSER: (slice(0x00, 0x10), None),
    CipherType.AES_256_DIFFUSER: (slice(0x00, 0x20), slice(0x20, 0x40)),
    CipherType.AES_256_NO_DIFFUSER: (slice(0x00, 0x20), None),
    CipherType.AES_XTS_128: (slice(0x00, 0x10), slice(0x10, 0x20)),
    CipherType.AES_XTS_256: (slice(0x00, 0x20), slice(0x20, 0x40)),
}


class _Mode(enum.Enum):
    CBC = "cbc"
    CBC_DIFFUSER = "cbc-diffuser"
    XTS = "xts"


def _ecb_encrypt(key: bytes, block: bytes) -> bytes:
    encryptor = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
    return encryptor.update(block) + encryptor.finalize()


def _cbc(key: bytes, iv: bytes, data: bytes, encrypt: bool) -> bytes:
    cipher = Cipher(algorithms.AES(key), modes.CBC(iv))
    context = cipher.encryptor() if encrypt else cipher.decryptor()
    return context.update(data) + context.finalize()


def _address_block(value: int) -> bytes:
    """Lay out a signed 64-bit value in the first 8 bytes of a zeroed block."""
    try:
        head = value.to_bytes(8, "little", signed=True)
    except OverflowError as exc:
        raise InvalidArgumentError("sector address does not fit in 64 bits") from exc
    return head + bytes(_BLOCK_SIZE - 8)


def _xor_repeating(data: bytes, key: bytes) -> bytes:
    stream = (key * (len(data) // len(key) + 1))[: len(data)]
    value = int.from_bytes(data, "little") ^ int.from_bytes(stream, "little")
    return value.to_bytes(len(data), "little")


class SectorCrypt:
    """Encrypts and decrypts sectors of a volume with its full-volume key."""

    def __init__(self, sector_size: int, disk_cipher: int) -> None:
        size = int(sector_size)
        if not _BLOCK_SIZE <= size <= _MAX_SECTOR_SIZE:
            raise InvalidArgumentError(
                f"sector size must be between {_BLOCK_SIZE} and {_MAX_SECTOR_SIZE}"
            )
        self.sector_size = size
        self.disk_cipher = int(disk_cipher)

        try:
            cipher: CipherType | None = CipherType(self.disk_cipher)
        except ValueError:
            cipher = None

        if cipher is not None and cipher.uses_diffuser():
            self._mode = _Mode.CBC_DIFFUSER
        elif cipher is not None and cipher.is_xts():
            self._mode = _Mode.XTS
        else:
            self._mode = _Mode.CBC

        if self._mode is not _Mode.XTS and size % _BLOCK_SIZE:
            raise InvalidArgumentError("CBC sector size must be a multiple of 16")

        self._fvek_key: bytes | None = None
        self._tweak_key: bytes | None = None

    @property
    def use_diffuser(self) -> bool:
        """Whether sectors go through the Elephant diffuser."""
        return self._mode is _Mode.CBC_DIFFUSER

    def set_fvek(self, algorithm: int, fvek: BytesLike) -> None:
        """Install the keys held in ``fvek`` for the given algorithm."""
        if fvek is None:
            raise InvalidArgumentError("a full-volume key is required")
        try:
            layout = _KEY_LAYOUT[CipherType(int(algorithm))]
        except (ValueError, KeyError):
            raise AlgorithmUnsupportedError(
                f"Algo not supported: {int(algorithm):#x}"
            ) from None

        raw = bytes(fvek)
        data_slice, tweak_slice = layout
        needed = max(s.stop for s in layout if s is not None)
        if len(raw) < needed:
            raise InvalidArgumentError(
                f"full-volume key too short: {len(raw)} bytes, need {needed}"
            )
        self._fvek_key = raw[data_slice]
        if tweak_slice is not None:
            self._tweak_key = raw[tweak_slice]

    def encrypt_sector(self, sector: BytesLike, sector_address: int) -> bytes:
        """Encrypt one sector located at byte address ``sector_address``."""
        data = self._check_sector(sector)
        address = int(sector_address)
        if self._mode is _Mode.XTS:
            return self._xts(data, address, encrypt=True)
        if self._mode is _Mode.CBC_DIFFUSER:
            keyed = _xor_repeating(data, self._sector_key(address))
            diffused = diffuser_b_encrypt(diffuser_a_encrypt(keyed))
            return self._cbc(diffused, address, encrypt=True)
        return self._cbc(data, address, encrypt=True)

    def decrypt_sector(self, sector: BytesLike, sector_address: int) -> bytes:
        """Decrypt one sector located at byte address ``sector_address``."""
        data = self._check_sector(sector)
        address = int(sector_address)
        if self._mode is _Mode.XTS:
            return self._xts(data, address, encrypt=False)
        if self._mode is _Mode.CBC_DIFFUSER:
            sector_key = self._sector_key(address)
            plain = self._cbc(data, address, encrypt=False)
            undiffused = diffuser_a_decrypt(diffuser_b_decrypt(plain))
            return _xor_repeating(undiffused, sector_key)
        return self._cbc(data, address, encrypt=False)

    def _check_sector(self, sector: BytesLike) -> bytes:
        if sector is None:
            raise InvalidArgumentError("a sector is required")
        data = bytes(sector)
        if len(data) != self.sector_size:
            raise InvalidArgumentError(
                f"sector is {len(data)} bytes, expected {self.sector_size}"
            )
        if self._fvek_key is None or (
            self._mode is not _Mode.CBC and self._tweak_key is None
        ):
            raise DislockerError(
                "keys have not been set", ReturnCode.ERROR_DISLOCKER_NOT_INITIALIZED
            )
        return data

    def _cbc(self, data: bytes, address: int, encrypt: bool) -> bytes:
        assert self._fvek_key is not None
        iv = _ecb_encrypt(self._fvek_key, _address_block(address))
        return _cbc(self._fvek_key, iv, data, encrypt)

    def _sector_key(self, address: int) -> bytes:
        assert self._tweak_key is not None
        block = bytearray(_address_block(address))
        first = _ecb_encrypt(self._tweak_key, bytes(block))
        block[15] = 0x80
        second = _ecb_encrypt(self._tweak_key, bytes(block))
        return (first + second)[:_SECTOR_KEY_SIZE]

    def _xts(self, data: bytes, address: int, encrypt: bool) -> bytes:
        assert self._fvek_key is not None and self._tweak_key is not None
        quotient = abs(address) // self.sector_size
        index = -quotient if address < 0 else quotient
        return aes_crypt_xts(
            self._fvek_key, self._tweak_key, encrypt, _address_block(index), data
        )