[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tp0net"
version = "0.1.0"
description = "A small TCP client and server that exchange length-prefixed messages and packages of strings"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "sockets", "client", "server", "serialization", "protocol"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tp0net-client = "tp0net.client:main"
tp0net-server = "tp0net.server:main"

[tool.hatch.build.targets.wheel]
packages = ["tp0net"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
