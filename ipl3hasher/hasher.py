"""Collision search driver and ROM signing."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike

from .cpu import IPL3_SIZE, CPUHasher
from .errors import ChecksumVerifyError, HasherError
from .search import Continue, End, Found, XSearcher

IPL3_OFFSET = 64
X_WORD_OFFSET = 4092


@dataclass(frozen=True)
class Collision:
    """Y and X values that make the IPL3 produce the target checksum."""

    y: int
    x: int


class RoundStatus(enum.Enum):
    """Outcome of a round that found no collision."""

    CONTINUE = "continue"
    END = "end"


def load_ipl3(path: str | PathLike[str]) -> bytes:
    """Read the IPL3 block that follows the 64-byte ROM header."""
    with open(path, "rb") as f:
        f.seek(IPL3_OFFSET)
        data = f.read(IPL3_SIZE)
    if len(data) != IPL3_SIZE:
        raise HasherError("failed to fill whole buffer")
    return data


def sign_rom(path: str | PathLike[str], y_bits: Sequence[int], y: int, x: int) -> None:
    """Write the Y bits and the X word of a collision into the ROM."""
    shift = len(y_bits) - 1
    with open(path, "r+b") as f:
        for i, offset in enumerate(y_bits):
            index, bit = divmod(offset, 8)
            bit = 7 - bit
            value = (y >> (shift - i)) & 1

            f.seek(IPL3_OFFSET + index)
            current = f.read(1)
            if len(current) != 1:
                raise HasherError("failed to fill whole buffer")
            byte = (current[0] & ~(1 << bit) & 0xFF) | (value << bit)

            f.seek(-1, 1)
            f.write(bytes([byte]))

        f.seek(X_WORD_OFFSET)
        f.write((x & 0xFFFFFFFF).to_bytes(4, "big"))
        f.flush()


class Hasher:
    """Walks Y values and searches X for each until a collision is found."""

    def __init__(
        self,
        path: str | PathLike[str],
        workgroups: tuple[int, int, int],
        seed: int,
        target_checksum: int,
        y_bits: Sequence[int],
        y_init: int,
    ) -> None:
        self._cpu = CPUHasher(load_ipl3(path), seed)
        self._searcher = XSearcher(workgroups)
        self._target_checksum = target_checksum
        self._y_bits = list(y_bits)
        self._y = y_init

    @property
    def y(self) -> int:
        """The Y value the next round will search."""
        return self._y

    def _is_y_finished(self) -> bool:
        return self._y > (1 << len(self._y_bits)) - 1

    def compute_round(self) -> Collision | RoundStatus:
        """Search every X for the current Y, then move on to the next Y."""
        if self._is_y_finished():
            return RoundStatus.END

        y_offset, state = self._cpu.y_round(self._y_bits, self._y)
        x_offset = 0

        while True:
            result = self._searcher.x_round(self._target_checksum, y_offset, x_offset, state)
            if isinstance(result, Found):
                checksum = self._cpu.verify(self._y_bits, self._y, result.x)
                if checksum != self._target_checksum:
                    raise ChecksumVerifyError(self._y, result.x, checksum)
                return Collision(self._y, result.x)
            if isinstance(result, Continue):
                x_offset += result.x_step
            elif isinstance(result, End):
                break

        if self._is_y_finished():
            return RoundStatus.END

        self._y += 1
        return RoundStatus.CONTINUE