"""Reference IPL3 checksum computation performed on the CPU."""

from __future__ import annotations

import struct
from collections.abc import Sequence

MAGIC = 0x6C078965
IPL3_SIZE = 4032
IPL3_WORDS = IPL3_SIZE // 4
STATE_WORDS = 16

_MASK = 0xFFFFFFFF


def _rol(value: int, shift: int) -> int:
    shift &= 31
    return ((value << shift) | (value >> (32 - shift))) & _MASK


def _ror(value: int, shift: int) -> int:
    shift &= 31
    return ((value >> shift) | (value << (32 - shift))) & _MASK


def _sum(a0: int, a1: int, a2: int) -> int:
    product = a0 * (a2 if a1 == 0 else a1)
    diff = ((product >> 32) - (product & _MASK)) & _MASK
    return a0 if diff == 0 else diff


def _calculate(ipl3: Sequence[int], state: Sequence[int], end: int) -> list[int]:
    """Run the checksum rounds over the first ``end`` words and return the new state."""
    s = list(state)
    end = min(end, IPL3_WORDS)

    for i in range(1, end + 1):
        prev = ipl3[max(i - 2, 0)]
        data = ipl3[i - 1]

        s[0] = (s[0] + _sum((1007 - i) & _MASK, data, i)) & _MASK
        s[1] = _sum(s[1], data, i)
        s[2] ^= data
        s[3] = (s[3] + _sum((data + 5) & _MASK, MAGIC, i)) & _MASK
        s[4] = (s[4] + _ror(data, prev & 0x1F)) & _MASK
        s[5] = (s[5] + _rol(data, prev >> 27)) & _MASK
        if data < s[6]:
            s[6] = ((s[3] + s[6]) & _MASK) ^ ((data + i) & _MASK)
        else:
            s[6] = ((s[4] + data) & _MASK) ^ s[6]
        s[7] = _sum(s[7], _rol(data, prev & 0x1F), i)
        s[8] = _sum(s[8], _ror(data, prev >> 27), i)
        s[9] = _sum(s[9], data, i) if prev < data else (s[9] + data) & _MASK

        if i == end:
            break

        nxt = ipl3[i]

        s[10] = _sum((s[10] + data) & _MASK, nxt, i)
        s[11] = _sum(s[11] ^ data, nxt, i)
        s[12] = (s[12] + (s[8] ^ data)) & _MASK
        s[13] = (s[13] + _ror(data, data & 0x1F) + _ror(nxt, nxt & 0x1F)) & _MASK
        s[14] = _sum(_sum(s[14], _ror(data, prev & 0x1F), i), _ror(nxt, data & 0x1F), i)
        s[15] = _sum(_sum(s[15], _rol(data, prev >> 27), i), _rol(nxt, data >> 27), i)

    return s


def finalize(state: Sequence[int]) -> int:
    """Fold a 16-word hasher state into the 48-bit IPL3 checksum."""
    if len(state) != STATE_WORDS:
        raise ValueError(f"state must hold {STATE_WORDS} words, got {len(state)}")

    buffer = [state[0]] * 4

    for i, data in enumerate(state):
        buffer[0] = (buffer[0] + _ror(data, data & 0x1F)) & _MASK
        if data < buffer[0]:
            buffer[1] = (buffer[1] + data) & _MASK
        else:
            buffer[1] = _sum(buffer[1], data, i)
        if ((data & 0x02) >> 1) == (data & 0x01):
            buffer[2] = (buffer[2] + data) & _MASK
        else:
            buffer[2] = _sum(buffer[2], data, i)
        if data & 0x01:
            buffer[3] ^= data
        else:
            buffer[3] = _sum(buffer[3], data, i)

    final_sum = _sum(buffer[0], buffer[1], 16)
    final_xor = buffer[3] ^ buffer[2]

    return ((final_sum & 0xFFFF) << 32) | final_xor


class CPUHasher:
    """Computes IPL3 checksums and the partial state handed to the X search."""

    def __init__(self, ipl3_raw_data: bytes, seed: int) -> None:
        if len(ipl3_raw_data) != IPL3_SIZE:
            raise ValueError(f"IPL3 data must be {IPL3_SIZE} bytes, got {len(ipl3_raw_data)}")
        if not 0 <= seed <= 0xFF:
            raise ValueError(f"seed must fit in a byte, got {seed}")

        self._ipl3 = struct.unpack(f">{IPL3_WORDS}I", bytes(ipl3_raw_data))
        initial = (((MAGIC * seed) + 1) & _MASK) ^ self._ipl3[0]
        self._state = (initial,) * STATE_WORDS

    def _apply_y_bits(self, y_bits: Sequence[int], y: int) -> list[int]:
        ipl3 = list(self._ipl3)
        shift = len(y_bits) - 1

        for i, offset in enumerate(y_bits):
            if not 0 <= offset < IPL3_WORDS * 32:
                raise ValueError(f"Y bit offset out of range: {offset}")
            index, bit = divmod(offset, 32)
            bit = 31 - bit
            value = (y >> (shift - i)) & 1
            ipl3[index] = (ipl3[index] & ~(1 << bit) & _MASK) | (value << bit)

        return ipl3

    def y_round(self, y_bits: Sequence[int], y: int) -> tuple[int, list[int]]:
        """Return the Y offset word and the state precomputed up to the last word."""
        ipl3 = self._apply_y_bits(y_bits, y)
        state = _calculate(ipl3, self._state, 1007)

        prev = ipl3[1005]
        data = ipl3[1006]

        # Part of the final round that does not depend on X is done here once.
        state[10] = (state[10] + data) & _MASK
        state[11] ^= data
        state[12] = (state[12] + (state[8] ^ data)) & _MASK
        state[13] = (state[13] + _ror(data, data & 0x1F)) & _MASK
        state[14] = _sum(state[14], _ror(data, prev & 0x1F), 1007)
        state[15] = _sum(state[15], _rol(data, prev >> 27), 1007)

        return data, state

    def verify(self, y_bits: Sequence[int], y: int, x: int) -> int:
        """Return the full checksum with the Y bits applied and X as the last word."""
        ipl3 = self._apply_y_bits(y_bits, y)
        ipl3[IPL3_WORDS - 1] = x & _MASK
        return finalize(_calculate(ipl3, self._state, IPL3_WORDS))