[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ataxxnet"
version = "0.1.0"
description = "Networked Ataxx: a two-player game server and an automatic client speaking line-delimited JSON over TCP"
requires-python = ">=3.10"
dependencies = []
keywords = ["ataxx", "board game", "game server", "tcp", "json"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ataxxnet = "ataxxnet.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ataxxnet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
