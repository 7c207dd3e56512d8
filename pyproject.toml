[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bdjuno"
version = "2.0.0"
description = "Modules and record types that turn Cosmos chain data (staking, slashing, mint) into database records"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "cosmos",
    "blockchain",
    "indexer",
    "staking",
    "slashing",
    "bech32",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["bdjuno"]

[tool.hatch.build.targets.sdist]
include = [
    "bdjuno",
    "tests",
    "README.md",
]

[tool.pytest.ini_options]
addopts = "-ra"
