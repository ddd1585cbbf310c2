[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "peersync"
version = "0.1.0"
description = "Peer-to-peer clock synchronization node speaking a small UDP protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["time", "synchronization", "udp", "peer-to-peer", "clock"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Time Synchronization",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["peersync"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
