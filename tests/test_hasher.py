import random

import pytest

from ipl3hasher.cli import parse_y_bits
from ipl3hasher.cpu import CPUHasher
from ipl3hasher.errors import HasherError
from ipl3hasher.hasher import Collision, Hasher, RoundStatus, load_ipl3, sign_rom

SEED = 0x3F


@pytest.fixture
def rom(tmp_path):
    path = tmp_path / "game.z64"
    path.write_bytes(random.Random(99).randbytes(4096))
    return path


def test_load_ipl3_skips_header(rom):
    assert load_ipl3(rom) == rom.read_bytes()[64:4096]


def test_load_ipl3_short_file(tmp_path):
    path = tmp_path / "short.z64"
    path.write_bytes(bytes(1000))
    with pytest.raises(HasherError):
        load_ipl3(path)


def test_load_ipl3_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_ipl3(tmp_path / "missing.z64")


def test_sign_rom_writes_x_and_y(tmp_path):
    path = tmp_path / "zero.z64"
    path.write_bytes(bytes(4096))
    y_bits = parse_y_bits("1022[3..0]")
    sign_rom(path, y_bits, 0b1010, 0xDEADBEEF)
    data = path.read_bytes()
    assert data[4092:4096] == (0xDEADBEEF).to_bytes(4, "big")
    assert data[64 + 4024:64 + 4028] == bytes([0, 0, 0, 0x0A])
    assert len(data) == 4096


def test_sign_rom_clears_bits(tmp_path):
    path = tmp_path / "ones.z64"
    path.write_bytes(b"\xff" * 4096)
    sign_rom(path, parse_y_bits("1022[3..0]"), 0, 0)
    data = path.read_bytes()
    assert data[64 + 4024:64 + 4028] == bytes([0xFF, 0xFF, 0xFF, 0xF0])
    assert data[:64 + 4024] == b"\xff" * (64 + 4024)


def test_signed_rom_matches_cpu_verify(rom):
    y_bits = parse_y_bits("1020[20..5],1022[7..0]")
    original = CPUHasher(load_ipl3(rom), SEED)
    expected = original.verify(y_bits, 0x1234, 0xCAFEF00D)
    sign_rom(rom, y_bits, 0x1234, 0xCAFEF00D)
    signed = CPUHasher(load_ipl3(rom), SEED)
    assert signed.verify([], 0, 0xCAFEF00D) == expected


def test_compute_round_finds_collision(rom):
    y_bits = parse_y_bits("1022[1..0]")
    target = CPUHasher(load_ipl3(rom), SEED).verify(y_bits, 1, 100)
    hasher = Hasher(rom, (1, 1, 1), SEED, target, y_bits, 1)
    assert hasher.compute_round() == Collision(1, 100)
    assert hasher.y == 1


def test_collision_signs_into_matching_rom(rom):
    y_bits = parse_y_bits("1022[1..0]")
    target = CPUHasher(load_ipl3(rom), SEED).verify(y_bits, 2, 300)
    collision = Hasher(rom, (1, 1, 2), SEED, target, y_bits, 2).compute_round()
    assert isinstance(collision, Collision)
    sign_rom(rom, y_bits, collision.y, collision.x)
    assert CPUHasher(load_ipl3(rom), SEED).verify([], 0, collision.x) == target


def test_compute_round_ends_past_last_y(rom):
    y_bits = parse_y_bits("1022[1..0]")
    hasher = Hasher(rom, (1, 1, 1), SEED, 0, y_bits, 4)
    assert hasher.compute_round() is RoundStatus.END
    assert hasher.y == 4


def test_hasher_rejects_short_rom(tmp_path):
    path = tmp_path / "short.z64"
    path.write_bytes(bytes(200))
    with pytest.raises(HasherError):
        Hasher(path, (1, 1, 1), SEED, 0, [], 0)