import pytest

from fvecrypt.ciphers import (
    HIGHEST_SUPPORTED_DISK_CIPHER,
    LOWEST_SUPPORTED_DISK_CIPHER,
    CipherType,
)

DISK_CIPHER_VALUES = [0x8000, 0x8001, 0x8002, 0x8003, 0x8004, 0x8005]

KEY_CIPHER_VALUES = [0x1000, 0x2000, 0x2001, 0x2002, 0x2003, 0x2004, 0x2005]


def test_lookup_from_metadata_value():
    assert CipherType(0x8004) is CipherType.AES_XTS_128
    assert CipherType(0x2003) is CipherType.VMK


def test_unknown_value_rejected():
    with pytest.raises(ValueError):
        CipherType(0x8006)


def test_supported_range_bounds():
    assert CipherType(LOWEST_SUPPORTED_DISK_CIPHER) is CipherType.AES_128_DIFFUSER
    assert CipherType(HIGHEST_SUPPORTED_DISK_CIPHER) is CipherType.AES_XTS_256
    assert CipherType(LOWEST_SUPPORTED_DISK_CIPHER).is_supported_disk_cipher() is True
    assert CipherType(HIGHEST_SUPPORTED_DISK_CIPHER).is_supported_disk_cipher() is True


@pytest.mark.parametrize("value", DISK_CIPHER_VALUES)
def test_disk_ciphers_supported(value):
    assert CipherType(value).is_supported_disk_cipher() is True


@pytest.mark.parametrize("value", KEY_CIPHER_VALUES)
def test_key_ciphers_not_disk_ciphers(value):
    cipher = CipherType(value)
    assert cipher.is_supported_disk_cipher() is False
    assert cipher.uses_diffuser() is False
    assert cipher.is_xts() is False


@pytest.mark.parametrize(
    "value, expected",
    [
        (0x8000, True),
        (0x8001, True),
        (0x8002, False),
        (0x8003, False),
        (0x8004, False),
        (0x8005, False),
    ],
)
def test_uses_diffuser(value, expected):
    assert CipherType(value).uses_diffuser() is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (0x8000, False),
        (0x8001, False),
        (0x8002, False),
        (0x8003, False),
        (0x8004, True),
        (0x8005, True),
    ],
)
def test_is_xts(value, expected):
    assert CipherType(value).is_xts() is expected


@pytest.mark.parametrize("value", [0x8002, 0x8003])
def test_plain_cbc_has_neither_diffuser_nor_xts(value):
    cipher = CipherType(value)
    assert cipher.uses_diffuser() is False
    assert cipher.is_xts() is False