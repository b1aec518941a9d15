"""AES-XEX and AES-XTS (with ciphertext stealing) over byte strings."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from fvecrypt.errors import InvalidArgumentError

BLOCK_SIZE = 16
_MASK128 = (1 << 128) - 1
_REDUCTION = 0x87

BytesLike = bytes | bytearray | memoryview


def _ecb(key: BytesLike, encrypt: bool) -> Callable[[bytes], bytes]:
    try:
        cipher = Cipher(algorithms.AES(bytes(key)), modes.ECB())
    except ValueError as exc:
        raise InvalidArgumentError(f"invalid AES key: {exc}") from exc
    context = cipher.encryptor() if encrypt else cipher.decryptor()
    return context.update


def _xor(left: bytes, right: bytes) -> bytes:
    size = len(left)
    value = int.from_bytes(left, "little") ^ int.from_bytes(right[:size], "little")
    return value.to_bytes(size, "little")


def gf128_mul_x_ble(block: BytesLike) -> bytes:
    """Multiply a 16-byte little-endian GF(2^128) element by x."""
    raw = bytes(block)
    if len(raw) != BLOCK_SIZE:
        raise InvalidArgumentError("a GF(2^128) element is 16 bytes long")
    value = int.from_bytes(raw, "little")
    result = (value << 1) & _MASK128
    if value >> 127:
        result ^= _REDUCTION
    return result.to_bytes(BLOCK_SIZE, "little")


def _tweaks(first: bytes) -> Iterator[bytes]:
    tweak = first
    while True:
        yield tweak
        tweak = gf128_mul_x_ble(tweak)


def _setup(
    crypt_key: BytesLike, tweak_key: BytesLike, encrypt: bool, iv: BytesLike
) -> tuple[Callable[[bytes], bytes], Iterator[bytes]]:
    iv_bytes = bytes(iv)
    if len(iv_bytes) != BLOCK_SIZE:
        raise InvalidArgumentError("the IV must be 16 bytes long")
    tweak_encrypt = _ecb(tweak_key, True)
    crypt = _ecb(crypt_key, encrypt)
    return crypt, _tweaks(tweak_encrypt(iv_bytes))


def _xex_block(crypt: Callable[[bytes], bytes], block: bytes, tweak: bytes) -> bytes:
    return _xor(crypt(_xor(block, tweak)), tweak)


def _blocks(data: bytes, count: int) -> list[bytes]:
    return [data[start:start + BLOCK_SIZE] for start in range(0, count * BLOCK_SIZE, BLOCK_SIZE)]


def aes_crypt_xex(
    crypt_key: BytesLike,
    tweak_key: BytesLike,
    encrypt: bool,
    iv: BytesLike,
    data: BytesLike,
) -> bytes:
    """Encrypt or decrypt ``data`` (a non-empty multiple of 16 bytes) in XEX mode."""
    raw = bytes(data)
    if not raw or len(raw) % BLOCK_SIZE:
        raise InvalidArgumentError("XEX data must be a non-empty multiple of 16 bytes")
    crypt, tweaks = _setup(crypt_key, tweak_key, encrypt, iv)
    return b"".join(
        _xex_block(crypt, block, tweak)
        for block, tweak in zip(_blocks(raw, len(raw) // BLOCK_SIZE), tweaks)
    )


def aes_crypt_xts(
    crypt_key: BytesLike,
    tweak_key: BytesLike,
    encrypt: bool,
    iv: BytesLike,
    data: BytesLike,
) -> bytes:
    """Encrypt or decrypt ``data`` (at least 16 bytes) in XTS mode.

    A trailing partial block is handled with ciphertext stealing.
    """
    raw = bytes(data)
    if len(raw) < BLOCK_SIZE:
        raise InvalidArgumentError("XTS data must hold at least one full block")
    crypt, tweaks = _setup(crypt_key, tweak_key, encrypt, iv)

    full, remaining = divmod(len(raw), BLOCK_SIZE)
    blocks = _blocks(raw, full)
    block_tweaks = [next(tweaks) for _ in range(full)]

    if remaining == 0:
        return b"".join(
            _xex_block(crypt, block, tweak) for block, tweak in zip(blocks, block_tweaks)
        )

    output = [
        _xex_block(crypt, block, tweak)
        for block, tweak in zip(blocks[:-1], block_tweaks[:-1])
    ]
    last_tweak = block_tweaks[-1]
    stolen_tweak = next(tweaks)
    tail = raw[full * BLOCK_SIZE:]

    if encrypt:
        head = _xex_block(crypt, blocks[-1], last_tweak)
        merged = tail + head[remaining:]
        output.append(_xex_block(crypt, merged, stolen_tweak))
        output.append(head[:remaining])
    else:
        head = _xex_block(crypt, blocks[-1], stolen_tweak)
        merged = tail + head[remaining:]
        output.append(_xex_block(crypt, merged, last_tweak))
        output.append(head[:remaining])

    return b"".join(output)