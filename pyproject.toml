[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mev_scalpel"
version = "0.1.0"
description = "Market-graph arbitrage scanner for Solana AMM pools: pool decoding, negative-cycle search and trade-size optimisation."
requires-python = ">=3.10"
keywords = ["solana", "arbitrage", "amm", "raydium", "orca", "spfa", "defi"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "httpx",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "respx",
]

[project.scripts]
mev-scalpel = "mev_scalpel.cli:main"
mev-scalpel-dev = "mev_scalpel.dev_runner:main"

[tool.hatch.build.targets.wheel]
packages = ["mev_scalpel"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
check_untyped_defs = true
