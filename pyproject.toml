[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "stockmatch"
version = "0.1.0"
description = "A small stock exchange: price-priority order books, an order matcher and SQLite-backed order and trade records."
requires-python = ">=3.10"
dependencies = []
keywords = ["stock exchange", "order book", "matching engine", "trading", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
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

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
stockmatch = "stockmatch.cli:main"

[tool.setuptools.packages.find]
include = ["stockmatch*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
