[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cworch"
version = "0.1.0"
description = "Transaction building, broadcasting with retry strategies, and response parsing for CosmWasm chain scripting"
requires-python = ">=3.10"
dependencies = []
keywords = ["cosmwasm", "blockchain", "cosmos", "transactions", "scripting"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["cworch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
