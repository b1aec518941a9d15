"""AES-CCM key wrapping as used for volume master and full-volume keys."""

from __future__ import annotations

import hmac
from collections.abc import Callable

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from fvecrypt.errors import InvalidArgumentError, KeyDecryptionError

AUTHENTICATOR_LENGTH = 16
KEY_NONCE_LENGTH = 12
_MAX_NONCE_LENGTH = 14
_BLOCK_SIZE = 16
_MOD128 = 1 << 128

BytesLike = bytes | bytearray | memoryview


def _block_encryptor(key: BytesLike) -> Callable[[bytes], bytes]:
    try:
        cipher = Cipher(algorithms.AES(bytes(key)), modes.ECB())
    except ValueError as exc:
        raise InvalidArgumentError(f"invalid AES key: {exc}") from exc
    return cipher.encryptor().update


def _xor(left: bytes, right: bytes) -> bytes:
    """XOR ``left`` with the first ``len(left)`` bytes of ``right``."""
    size = len(left)
    value = int.from_bytes(left, "big") ^ int.from_bytes(right[:size], "big")
    return value.to_bytes(size, "big")


def _check_nonce(nonce: BytesLike) -> bytes:
    if nonce is None:
        raise InvalidArgumentError("a nonce is required")
    raw = bytes(nonce)
    if len(raw) > _MAX_NONCE_LENGTH:
        raise InvalidArgumentError(f"nonce longer than {_MAX_NONCE_LENGTH} bytes")
    return raw


def _chunks(data: bytes) -> list[bytes]:
    return [data[start:start + _BLOCK_SIZE] for start in range(0, len(data), _BLOCK_SIZE)]


def ccm_crypt(
    key: BytesLike, nonce: BytesLike, data: BytesLike, mac: BytesLike
) -> tuple[bytes, bytes]:
    """Run the CCM counter stream over ``data`` and ``mac``.

    Returns the transformed data and the transformed authenticator. The
    operation is its own inverse.
    """
    if key is None or data is None or mac is None:
        raise InvalidArgumentError("key, data and mac are required")
    nonce_bytes = _check_nonce(nonce)
    mac_bytes = bytes(mac)
    if len(mac_bytes) > AUTHENTICATOR_LENGTH:
        raise InvalidArgumentError("authenticator longer than 16 bytes")
    encrypt_block = _block_encryptor(key)

    counter_block = bytearray(_BLOCK_SIZE)
    counter_block[0] = _MAX_NONCE_LENGTH - len(nonce_bytes)
    counter_block[1:1 + len(nonce_bytes)] = nonce_bytes
    counter = int.from_bytes(counter_block, "big")

    mac_out = _xor(mac_bytes, encrypt_block(bytes(counter_block)))

    output = bytearray()
    for chunk in _chunks(bytes(data)):
        counter = (counter + 1) % _MOD128
        keystream = encrypt_block(counter.to_bytes(_BLOCK_SIZE, "big"))
        output += _xor(chunk, keystream)
    return bytes(output), mac_out


def compute_tag(key: BytesLike, nonce: BytesLike, data: BytesLike) -> bytes:
    """Compute the CCM authentication tag of the plaintext ``data``."""
    if key is None or data is None:
        raise InvalidArgumentError("key and data are required")
    nonce_bytes = _check_nonce(nonce)
    raw = bytes(data)
    encrypt_block = _block_encryptor(key)

    first = bytearray(AUTHENTICATOR_LENGTH)
    first[0] = (_MAX_NONCE_LENGTH - len(nonce_bytes)) | (
        ((AUTHENTICATOR_LENGTH - 2) & 0xFE) << 2
    )
    first[1:1 + len(nonce_bytes)] = nonce_bytes
    size = len(raw)
    for position in range(15, len(nonce_bytes), -1):
        first[position] = size & 0xFF
        size >>= 8

    state = encrypt_block(bytes(first))
    for chunk in _chunks(raw):
        state = encrypt_block(_xor(chunk, state) + state[len(chunk):])
    return state


def encrypt_key(
    plaintext: BytesLike, nonce: BytesLike, key: BytesLike
) -> tuple[bytes, bytes]:
    """Wrap ``plaintext`` with ``key``; return the ciphertext and its authenticator."""
    if plaintext is None:
        raise InvalidArgumentError("plaintext is required")
    tag = compute_tag(key, nonce, plaintext)
    return ccm_crypt(key, nonce, plaintext, tag)


def decrypt_key(
    data: BytesLike, mac: BytesLike, nonce: BytesLike, key: BytesLike
) -> bytes:
    """Unwrap an encrypted key and check it against its authenticator.

    Raises KeyDecryptionError when the authenticators do not match.
    """
    if data is None or mac is None or nonce is None or key is None:
        raise InvalidArgumentError("data, mac, nonce and key are required")
    nonce_bytes = bytes(nonce)
    if len(nonce_bytes) != KEY_NONCE_LENGTH:
        raise InvalidArgumentError(f"key nonces are {KEY_NONCE_LENGTH} bytes long")
    mac_bytes = bytes(mac)
    if len(mac_bytes) != AUTHENTICATOR_LENGTH:
        raise InvalidArgumentError(
            f"key authenticators are {AUTHENTICATOR_LENGTH} bytes long"
        )

    plaintext, expected_tag = ccm_crypt(key, nonce_bytes, data, mac_bytes)
    actual_tag = compute_tag(key, nonce_bytes, plaintext)
    if not hmac.compare_digest(expected_tag, actual_tag):
        raise KeyDecryptionError("The MACs don't match.")
    return plaintext