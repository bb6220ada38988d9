"""Shared constants and error types of the Aleph session runtime API."""

from __future__ import annotations

KEY_TYPE = b"alp0"
ALEPH_ENGINE_ID = b"FRNK"

DEFAULT_SESSION_PERIOD = 900
DEFAULT_MILLISECS_PER_BLOCK = 1000

TOKEN_DECIMALS = 12
ADDRESSES_ENCODING = 42
DEFAULT_UNIT_CREATION_DELAY = 300

_API_ERROR_VARIANTS = ("DecodeKey",)


class ApiError(Exception):
    """Error reported by the session runtime API.

    The only variant is ``DecodeKey``: a queued session key could not be
    decoded into an authority id. The error has a one-byte wire encoding
    holding the variant index.
    """

    def __init__(self, variant: str = "DecodeKey") -> None:
        if variant not in _API_ERROR_VARIANTS:
            raise ValueError(f"unknown ApiError variant: {variant!r}")
        super().__init__(variant)
        self.variant = variant

    @classmethod
    def decode_key(cls) -> "ApiError":
        """Return the ``DecodeKey`` error."""
        return cls("DecodeKey")

    def encode(self) -> bytes:
        """Encode the error as its variant index."""
        return bytes([_API_ERROR_VARIANTS.index(self.variant)])

    @classmethod
    def decode(cls, data: bytes) -> "ApiError":
        """Decode an error from its one-byte encoding."""
        if len(data) != 1:
            raise ValueError("ApiError encoding must be exactly one byte")
        index = data[0]
        if index >= len(_API_ERROR_VARIANTS):
            raise ValueError(f"invalid ApiError variant index: {index}")
        return cls(_API_ERROR_VARIANTS[index])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return self.variant == other.variant

    def __hash__(self) -> int:
        return hash(self.variant)

    def __repr__(self) -> str:
        return f"ApiError({self.variant!r})"