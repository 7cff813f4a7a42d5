"""AES-128-ECB with zero-byte padding, as used by the device firmware."""

from __future__ import annotations

from Crypto.Cipher import AES

from ..exceptions import CryptoError

BLOCK_SIZE = AES.block_size  # 16

# Published vendor key, used until a device key is bound.
DEFAULT_KEY = "a3K8Bx%2r8Y7#xDh"


def _cipher(key: str | bytes):
    if isinstance(key, str):
        key = key.encode("utf-8")
    try:
        return AES.new(key, AES.MODE_ECB)
    except ValueError as e:
        raise CryptoError(f"Invalid AES key ({len(key)} bytes): {e}") from e


def zero_pad(data: bytes) -> bytes:
    """Pad ``data`` with zero bytes up to the next block boundary."""
    return data + b"\x00" * (-len(data) % BLOCK_SIZE)


def encrypt(data: bytes, key: str | bytes) -> bytes:
    """Zero-pad and encrypt ``data``.

    Raises:
        CryptoError: If the key length is not a valid AES key length.
    """
    try:
        return _cipher(key).encrypt(zero_pad(data))
    except ValueError as e:
        raise CryptoError(f"Can not encrypt pack: {e}") from e


def decrypt(data: bytes, key: str | bytes) -> bytes:
    """Decrypt ``data``. Padding is left in place.

    Raises:
        CryptoError: On a bad key, or ciphertext that is not whole blocks.
    """
    if not data or len(data) % BLOCK_SIZE:
        raise CryptoError(
            f"Ciphertext length {len(data)} is not a multiple of {BLOCK_SIZE}"
        )
    try:
        return _cipher(key).decrypt(data)
    except ValueError as e:
        raise CryptoError(f"Can not decrypt pack: {e}") from e
