"""Command entry point of the IPL3 hasher."""

from __future__ import annotations

import time
from collections.abc import Sequence

from .cli import parse_args
from .errors import HasherError
from .hasher import Collision, Hasher, RoundStatus, sign_rom


def _print_round_time(y: int, started: float) -> None:
    print(f"Y={y} took {time.perf_counter() - started:.6f}s")


def run(argv: Sequence[str] | None = None) -> Collision | None:
    """Search for a collision as the arguments describe; return it if found."""
    options = parse_args(argv)
    seed, target_checksum = options.cic

    hasher = Hasher(
        options.rom,
        options.workgroups,
        seed,
        target_checksum,
        options.y_bits,
        options.y_init,
    )

    print(f"Target seed and checksum: 0x{seed:02X} 0x{target_checksum:012X}")

    while True:
        started = time.perf_counter()
        y_current = hasher.y
        result = hasher.compute_round()

        if isinstance(result, Collision):
            _print_round_time(y_current, started)
            print(f"Found collision: Y={result.y:08X} X={result.x:08X}")
            if options.sign:
                sign_rom(options.rom, options.y_bits, result.y, result.x)
                print("ROM has been successfully signed")
            return result
        if result is RoundStatus.END:
            break
        _print_round_time(y_current, started)

    print("Sorry nothing")
    return None


def main(argv: Sequence[str] | None = None) -> None:
    """Run the hasher and report any failure on standard output."""
    try:
        run(argv)
    except (HasherError, OSError) as error:
        print(f"IPL3 hasher error: {error}")


if __name__ == "__main__":
    main()