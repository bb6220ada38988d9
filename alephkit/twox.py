"""The xxHash64 function and the 128-bit ``twox`` hash built from it."""

from __future__ import annotations

import struct

_MASK = (1 << 64) - 1

_P1 = 11400714785074694791
_P2 = 14029467366897019727
_P3 = 1609587929392839161
_P4 = 9650029242287828579
_P5 = 2870177450012600261


def _rotl(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (64 - bits))) & _MASK


def _round(acc: int, lane: int) -> int:
    acc = (acc + lane * _P2) & _MASK
    acc = _rotl(acc, 31)
    return (acc * _P1) & _MASK


def _merge(acc: int, value: int) -> int:
    acc ^= _round(0, value)
    return (acc * _P1 + _P4) & _MASK


def xxh64(data: bytes, seed: int = 0) -> int:
    """Return the 64-bit xxHash of ``data`` under ``seed``."""
    buf = bytes(memoryview(data))
    seed &= _MASK
    length = len(buf)
    stripes_end = length - length % 32

    if length >= 32:
        accs = [
            (seed + _P1 + _P2) & _MASK,
            (seed + _P2) & _MASK,
            seed,
            (seed - _P1) & _MASK,
        ]
        for lanes in struct.iter_unpack("<4Q", buf[:stripes_end]):
            accs = [_round(acc, lane) for acc, lane in zip(accs, lanes)]
        h = (
            _rotl(accs[0], 1) + _rotl(accs[1], 7) + _rotl(accs[2], 12) + _rotl(accs[3], 18)
        ) & _MASK
        for acc in accs:
            h = _merge(h, acc)
    else:
        h = (seed + _P5) & _MASK

    h = (h + length) & _MASK

    tail = buf[stripes_end:]
    eights_end = len(tail) - len(tail) % 8
    for (lane,) in struct.iter_unpack("<Q", tail[:eights_end]):
        h ^= _round(0, lane)
        h = (_rotl(h, 27) * _P1 + _P4) & _MASK

    rest = tail[eights_end:]
    if len(rest) >= 4:
        (word,) = struct.unpack_from("<I", rest)
        h ^= (word * _P1) & _MASK
        h = (_rotl(h, 23) * _P2 + _P3) & _MASK
        rest = rest[4:]
    for byte in rest:
        h ^= (byte * _P5) & _MASK
        h = (_rotl(h, 11) * _P1) & _MASK

    h ^= h >> 33
    h = (h * _P2) & _MASK
    h ^= h >> 29
    h = (h * _P3) & _MASK
    h ^= h >> 32
    return h


def twox_128(data: bytes) -> bytes:
    """Return the 16-byte hash made of xxHash64 under seeds 0 and 1, little endian."""
    return b"".join(xxh64(data, seed).to_bytes(8, "little") for seed in (0, 1))