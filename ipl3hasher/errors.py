"""Errors raised by the hasher."""

from __future__ import annotations


class HasherError(Exception):
    """Base class for hasher failures."""


class ChecksumVerifyError(HasherError):
    """A reported collision did not reproduce the target checksum."""

    def __init__(self, y: int, x: int, checksum: int) -> None:
        self.y = y
        self.x = x
        self.checksum = checksum
        super().__init__(
            f"GPU Hasher result is wrong: Y={y:08X} X={x:08X} | 0x{checksum:012X}"
        )