"""Search for N64 IPL3 checksum collisions and sign ROMs with the result."""

__version__ = "1.2.1"