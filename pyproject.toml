[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ipl3hasher"
version = "1.2.1"
description = "Search for IPL3 checksum collisions in N64 ROMs and sign the ROM with the result"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["n64", "ipl3", "cic", "checksum", "collision", "rom", "homebrew"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ipl3hasher = "ipl3hasher.main:main"

[tool.hatch.build.targets.wheel]
packages = ["ipl3hasher"]

[tool.hatch.build.targets.sdist]
include = ["ipl3hasher", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
