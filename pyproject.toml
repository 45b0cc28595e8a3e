[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "blueprintkit"
version = "0.1.0"
description = "In-memory ledger of resources, vaults and badges, with financial components such as airdrops, escrow, auctions, token sales and a marketplace."
requires-python = ">=3.10"
dependencies = []
keywords = ["ledger", "tokens", "escrow", "auction", "airdrop", "marketplace", "badges", "simulation"]
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
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["blueprintkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
