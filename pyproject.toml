[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "alephkit"
version = "0.1.0"
description = "Session pallet, storage migration, chain-spec forking, flooder options and consensus timing helpers for an Aleph-style blockchain node"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "blockchain",
    "consensus",
    "finality",
    "session",
    "chainspec",
    "migration",
    "xxhash",
]
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
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
alephkit-fork-off = "alephkit.fork_off:main"

[tool.hatch.build.targets.wheel]
packages = ["alephkit"]

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
