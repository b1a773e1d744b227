# ipl3hasher

A tool that searches for IPL3 checksum collisions in N64 ROMs. It is meant for
homebrew that ships its own IPL3 boot stage. The CIC works out a checksum over the
4032 bytes of IPL3 that start at offset 0x40 of the ROM. A custom IPL3 only boots
if that checksum matches the value the chosen CIC expects.

The search changes two things:

* a set of chosen bits in the IPL3 (the **Y** bits);
* the last 32-bit word of the IPL3 (**X**).

For each value of Y, the partial checksum state is worked out once. Then X values
are tried in NumPy-vectorised batches until the full checksum equals the target.
Before a hit is reported, it is checked again with the plain reference checksum.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

```
ipl3hasher ROM [options]
```

You can also use `python -m ipl3hasher.main ROM [options]`.

| Option | Default | Meaning |
| --- | --- | --- |
| `-s`, `--sign` | off | Write the Y bits and X word that were found back into the ROM |
| `-c`, `--cic` | `6102` | Target CIC: `6101`, `6102`/`7101`, `6103`/`7103`, `6105`/`7105`, `6106`/`7106`, `8303`, `8401`, `5167`, `DDUS` |
| `-b`, `--y-bits` | `1022[31..0]` | Y bits, given as 32-bit word indices with optional bit ranges, e.g. `40[16..8],56[24..12]` |
| `-y`, `--y-init` | `0` | The Y value to start from |
| `-w`, `--workgroups` | `256,256,256` | Round size `x,y,z`. One round tests `x*y*z*256` values of X. Missing values count as 1 |

Rules for `--y-bits`:

* Word indices must lie strictly between 16 and 1023.
* Bit ranges are written high to low, as `[end..start]`, with bits from 0 to 31.
* A word with no range uses all 32 of its bits.
* Bits are deduplicated, and at most 32 Y bits may be chosen in total.

Example: search for a 6102 collision and sign the ROM in place.

```
ipl3hasher game.z64 --cic 6102 --sign
```

The command prints the target seed and checksum, then how long each Y round took.
When it finds a collision it prints `Found collision: Y=XXXXXXXX X=XXXXXXXX`. If it
tries every Y value without a match, it prints `Sorry nothing`.

If a ROM cannot be read or written, or a reported X fails verification, the command
prints `IPL3 hasher error: ...` and stops. Bad option values are rejected by the
argument parser.

## Library use

* `ipl3hasher.cpu.CPUHasher(ipl3_raw_data, seed)`
  * `y_round(y_bits, y)` returns the Y offset word and the precomputed state.
  * `verify(y_bits, y, x)` returns the full 48-bit checksum.
  * `ipl3hasher.cpu.finalize(state)` folds a 16-word state into a checksum.
* `ipl3hasher.cli`
  * `parse_cic`, `parse_y_bits` and `parse_workgroups` parse the same strings as
    the options above. They raise `ValueError` on bad input.
  * `parse_args(argv)` returns an `Options` dataclass.
* `ipl3hasher.search.XSearcher(workgroups)`
  * `x_round(target_checksum, y_offset, x_offset, state)` searches one block of X.
  * It returns `Found(x)`, `Continue(x_step)` or `End()`.
* `ipl3hasher.hasher.Hasher(path, workgroups, seed, target_checksum, y_bits, y_init)`
  * `compute_round()` searches one Y value at a time.
  * It returns a `Collision(y, x)`, `RoundStatus.CONTINUE` or `RoundStatus.END`.
  * `Hasher.y` is the Y value the next round will search.
* `ipl3hasher.hasher.load_ipl3(path)` reads the IPL3 block from a ROM.
* `ipl3hasher.hasher.sign_rom(path, y_bits, y, x)` patches a ROM file with a result.
* `ipl3hasher.main.run(argv)` runs the whole search and returns the `Collision` or
  `None`.

Errors derive from `ipl3hasher.errors.HasherError`. A candidate that fails
verification raises `ChecksumVerifyError`, which carries `y`, `x` and `checksum`.

## What it does not do

The whole search runs on the CPU with NumPy. It does not use a GPU, so there are no
options to choose a GPU adapter or a shader. The `--workgroups` value only sets how
many X values one round covers, with each round handled in chunks of 262144. A full
pass over all 2^32 X values for one Y takes much longer than it would on
GPU-accelerated hardware.