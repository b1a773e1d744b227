"""Command-line options of the IPL3 hasher."""

from __future__ import annotations

import argparse
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_U32_MAX = 0xFFFFFFFF
_DIGITS = re.compile(r"\+?[0-9]+")

_CICS = {
    "6101": (0x3F, 0x45CC73EE317A),
    "6102": (0x3F, 0xA536C0F1D859),
    "7101": (0x3F, 0xA536C0F1D859),
    "6103": (0x78, 0x586FD4709867),
    "7103": (0x78, 0x586FD4709867),
    "6105": (0x91, 0x8618A45BC2D3),
    "7105": (0x91, 0x8618A45BC2D3),
    "6106": (0x85, 0x2BBAD4E6EB74),
    "7106": (0x85, 0x2BBAD4E6EB74),
    "8303": (0xDD, 0x32B294E2AB90),
    "8401": (0xDD, 0x6EE8D9E84970),
    "5167": (0xDD, 0x083C6C77E0B1),
    "DDUS": (0xDE, 0x05BA2EF0A5F1),
}


def _parse_u32(text: str) -> int:
    if not text:
        raise ValueError("cannot parse integer from empty string")
    if not _DIGITS.fullmatch(text):
        raise ValueError("invalid digit found in string")
    value = int(text)
    if value > _U32_MAX:
        raise ValueError("number too large to fit in target type")
    return value


def parse_cic(text: str) -> tuple[int, int]:
    """Return the (seed, target checksum) pair of a CIC name."""
    try:
        return _CICS[text]
    except KeyError:
        raise ValueError("Unknown CIC") from None


def parse_y_bits(text: str) -> list[int]:
    """Parse word indices with optional bit ranges into sorted IPL3 bit offsets."""
    offsets: set[int] = set()

    for piece in text.split(","):
        parts = piece.split("[")
        index = _parse_u32(parts[0])

        if index <= 16 or index >= 1023:
            raise ValueError(f"invalid Y bits index: {index}")

        if len(parts) == 1:
            start, end = 0, 31
        elif len(parts) == 2:
            range_parts = parts[1].split("..")
            if len(range_parts) != 2:
                raise ValueError(f"invalid Y bits range format for index {index}")
            end = _parse_u32(range_parts[0])
            if not range_parts[1].endswith("]"):
                raise ValueError(f"invalid Y bits format for index {index}")
            start = _parse_u32(range_parts[1][:-1])
            if start > end or end >= 32:
                raise ValueError(
                    f"invalid Y bits range for index {index}: 0 < {start} <= {end} < 32"
                )
        else:
            raise ValueError(f"invalid Y bits format for index {index}")

        offsets.update((index - 16) * 32 + (31 - bit) for bit in range(start, end + 1))

    result = sorted(offsets)
    if len(result) > 32:
        raise ValueError(f"too many Y bits: {len(result)} (max: 32)")
    return result


def parse_workgroups(text: str) -> tuple[int, int, int]:
    """Parse up to three comma-separated workgroup counts, missing ones being 1."""
    pieces = text.split(",")
    if len(pieces) > 3:
        raise ValueError("invalid workgroups format")
    values = [_parse_u32(piece) for piece in pieces] + [1] * (3 - len(pieces))
    return values[0], values[1], values[2]


def _arg_type(func: Callable[[str], Any], name: str) -> Callable[[str], Any]:
    def convert(text: str) -> Any:
        try:
            return func(text)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from None

    convert.__name__ = name
    return convert


@dataclass(frozen=True)
class Options:
    """Parsed command-line options."""

    rom: Path
    sign: bool
    cic: tuple[int, int]
    y_bits: list[int]
    y_init: int
    workgroups: tuple[int, int, int]

    @property
    def seed(self) -> int:
        return self.cic[0]

    @property
    def target_checksum(self) -> int:
        return self.cic[1]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the hasher command."""
    parser = argparse.ArgumentParser(
        prog="ipl3hasher",
        description="Brute force an IPL3 checksum collision for a ROM.",
    )
    parser.add_argument(
        "rom", type=Path, help="Path to the source ROM file with IPL3 to be brute forced"
    )
    parser.add_argument(
        "-s", "--sign", action="store_true",
        help="Sign the source ROM file with found collision data",
    )
    parser.add_argument(
        "-c", "--cic", default="6102", type=_arg_type(parse_cic, "cic"),
        help="The CIC for which a checksum must be calculated",
    )
    parser.add_argument(
        "-b", "--y-bits", default="1022[31..0]", type=_arg_type(parse_y_bits, "y_bits"),
        help="Y bits to use: 32-bit word indices and bit ranges (eg: 40[16..8],56[24..12])",
    )
    parser.add_argument(
        "-y", "--y-init", default="0", type=_arg_type(_parse_u32, "y_init"),
        help="The Y coordinate to start with",
    )
    parser.add_argument(
        "-w", "--workgroups", default="256,256,256",
        type=_arg_type(parse_workgroups, "workgroups"),
        help="The number of workgroups to use (x,y,z format, total threads = x*y*z*256)",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> Options:
    """Parse command-line arguments into Options."""
    ns = build_parser().parse_args(argv)
    return Options(
        rom=ns.rom,
        sign=ns.sign,
        cic=ns.cic,
        y_bits=ns.y_bits,
        y_init=ns.y_init,
        workgroups=ns.workgroups,
    )