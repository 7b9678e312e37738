[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sanoemu"
version = "1.0.0"
description = "Memory, timing and video rendering components for the SANo three-CPU console emulator"
requires-python = ">=3.10"
keywords = ["emulator", "65816", "console", "video", "tilemap", "sprites", "memory-bus"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Emulators",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sanoemu"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
