import random

import pytest

from ipl3hasher.cli import parse_y_bits
from ipl3hasher.cpu import CPUHasher
from ipl3hasher.search import Continue, End, Found, XSearcher

SEED = 0x3F


@pytest.fixture
def cpu():
    data = random.Random(1234).randbytes(4032)
    return CPUHasher(data, SEED)


@pytest.fixture
def y_bits():
    return parse_y_bits("1022[3..0]")


@pytest.mark.parametrize("x", [0, 1, 77, 1023])
def test_finds_x_matching_cpu_checksum(cpu, y_bits, x):
    y = 5
    y_offset, state = cpu.y_round(y_bits, y)
    target = cpu.verify(y_bits, y, x)
    result = XSearcher((1, 1, 4)).x_round(target, y_offset, 0, state)
    assert result == Found(x)


def test_found_value_reproduces_target(cpu, y_bits):
    y = 3
    y_offset, state = cpu.y_round(y_bits, y)
    target = cpu.verify(y_bits, y, 600)
    result = XSearcher((1, 1, 1)).x_round(target, y_offset, 512, state)
    assert isinstance(result, Found)
    assert cpu.verify(y_bits, y, result.x) == target


def test_finds_x_at_top_of_range(cpu, y_bits):
    y_offset, state = cpu.y_round(y_bits, 0)
    target = cpu.verify(y_bits, 0, 0xFFFFFFFF)
    result = XSearcher((1, 1, 1)).x_round(target, y_offset, 0xFFFFFF00, state)
    assert result == Found(0xFFFFFFFF)


def test_continue_when_no_match(cpu, y_bits):
    y_offset, state = cpu.y_round(y_bits, 0)
    target = cpu.verify(y_bits, 0, 10) ^ 1
    searcher = XSearcher((1, 1, 1))
    assert searcher.x_round(target, y_offset, 0, state) == Continue(256)


def test_continue_step_follows_workgroups(cpu, y_bits):
    y_offset, state = cpu.y_round(y_bits, 0)
    target = cpu.verify(y_bits, 0, 10) ^ 1
    searcher = XSearcher((2, 1, 3))
    assert searcher.x_round(target, y_offset, 0, state) == Continue(2 * 3 * 256)


def test_end_when_range_exhausted(cpu, y_bits):
    y_offset, state = cpu.y_round(y_bits, 0)
    target = cpu.verify(y_bits, 0, 0xFFFFFFF0) ^ 1
    result = XSearcher((1, 1, 1)).x_round(target, y_offset, 0xFFFFFF80, state)
    assert result == End()


def test_zero_workgroups_rejected():
    with pytest.raises(ValueError):
        XSearcher((0, 1, 1))


def test_bad_state_length_rejected():
    with pytest.raises(ValueError):
        XSearcher((1, 1, 1)).x_round(0, 0, 0, [0] * 15)


def test_bad_x_offset_rejected(cpu, y_bits):
    y_offset, state = cpu.y_round(y_bits, 0)
    with pytest.raises(ValueError):
        XSearcher((1, 1, 1)).x_round(0, y_offset, 1 << 32, state)