"""Exception hierarchy for the Gree protocol client."""


class GreeError(Exception):
    """Base exception for this package."""


class TransportError(GreeError):
    """Socket failure, or every attempt of an exchange failed."""


class ProtocolError(GreeError):
    """Malformed envelope or payload, or an unexpected response shape."""


class CryptoError(GreeError):
    """Encryption or decryption failed (bad key length, corrupt ciphertext)."""


class DiscoveryError(GreeError):
    """Scan response did not identify the device."""


class BindingError(GreeError):
    """Bind response did not carry a usable key."""


class AliasError(GreeError, ValueError):
    """Alias table lookup failure."""


class OutOfRangeError(AliasError):
    """Integer code has no alias for the property."""


class UnknownValueError(AliasError):
    """Name is not an alias of the property."""
