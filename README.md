# fvecrypt

Python implementations of the cryptographic building blocks used by
BitLocker-encrypted volumes. AES itself comes from the `cryptography`
library; everything around it (sector IVs, the Elephant diffuser, XTS with
ciphertext stealing, the CCM key wrapping, CRC-32) is done here.

## Modules

- `fvecrypt.sectors.SectorCrypt` encrypts and decrypts whole sectors. The mode
  is picked from the volume's cipher identifier given to the constructor:
  AES-CBC with the Elephant diffuser for `AES_128_DIFFUSER` and
  `AES_256_DIFFUSER`, AES-XTS for `AES_XTS_128` and `AES_XTS_256`, and plain
  AES-CBC for anything else. `set_fvek(algorithm, fvek)` takes the data key
  and, where the algorithm needs one, the tweak key out of the full-volume key
  bytes. The `use_diffuser` property tells whether the diffuser is in use.
- `fvecrypt.ccm` holds the AES-CCM variant that protects key blobs:
  `ccm_crypt` runs the counter stream over data and authenticator,
  `compute_tag` computes the tag of plaintext, `encrypt_key` wraps a key and
  `decrypt_key` unwraps one and checks its tag (nonces of 12 bytes,
  authenticators of 16).
- `fvecrypt.xts` provides `aes_crypt_xex`, `aes_crypt_xts` (a trailing partial
  block is handled by ciphertext stealing) and `gf128_mul_x_ble`.
- `fvecrypt.diffuser` implements `diffuser_a_encrypt`, `diffuser_a_decrypt`,
  `diffuser_b_encrypt` and `diffuser_b_decrypt` over little-endian 32-bit words.
- `fvecrypt.crc32.crc32` computes the standard CRC-32 (reflected polynomial
  `0xEDB88320`).
- `fvecrypt.ciphers.CipherType` lists the cipher identifiers found in volume
  metadata, with `is_supported_disk_cipher()`, `uses_diffuser()` and `is_xts()`.
- `fvecrypt.errors` holds `ReturnCode` and the exceptions `DislockerError`,
  `InvalidArgumentError` (also a `ValueError`), `AlgorithmUnsupportedError`
  and `KeyDecryptionError`; each carries a `ReturnCode` in its `code` attribute.

## Installation

```
pip install fvecrypt
```

## Usage

Sectors:

```python
from fvecrypt.ciphers import CipherType
from fvecrypt.sectors import SectorCrypt

fvek = bytes(64)  # full-volume key material, made up for the example

crypt = SectorCrypt(512, CipherType.AES_XTS_128)
crypt.set_fvek(CipherType.AES_XTS_128, fvek)

plaintext = bytes(512)
ciphertext = crypt.encrypt_sector(plaintext, 0x1000)
assert crypt.decrypt_sector(ciphertext, 0x1000) == plaintext
```

The sector address is a byte address; in XTS mode it is divided by the sector
size to form the tweak. A sector of the wrong length, or one processed before
`set_fvek`, raises an error. An algorithm that `set_fvek` does not know raises
`AlgorithmUnsupportedError`.

Key blobs protected by AES-CCM:

```python
from fvecrypt.ccm import decrypt_key, encrypt_key

wrapping_key = bytes(32)
nonce = bytes(12)
data, mac = encrypt_key(b"key material", nonce, wrapping_key)
assert decrypt_key(data, mac, nonce, wrapping_key) == b"key material"
```

If the tags do not match, `decrypt_key` raises `KeyDecryptionError`.

Checksums:

```python
from fvecrypt.crc32 import crc32

assert crc32(b"123456789") == 0xCBF43926
```

## What this package does not do

It works on bytes handed to it. It does not open devices or image files, read
or parse volume headers and metadata, derive keys from passwords, recovery
passwords or key files, or mount volumes. A caller has to supply the
full-volume key, the sector data and the sector addresses.

## Running the tests

```
pip install -e ".[test]"
pytest
```