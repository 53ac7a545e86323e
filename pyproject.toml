[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "meshcore"
version = "0.1.0"
description = "Packet codec, cryptography and deduplication helpers for MeshCore mesh radio networks"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["meshcore", "mesh", "lora", "radio", "packet", "codec", "ed25519", "x25519"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["meshcore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
