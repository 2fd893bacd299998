[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "redstore"
version = "0.1.0"
description = "Building blocks for a Redis-style in-memory store: RESP replies and parser, data structures, geohash and pub/sub"
requires-python = ">=3.10"
dependencies = []
keywords = ["redis", "resp", "skiplist", "sorted-set", "geohash", "pubsub", "in-memory"]
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
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["redstore"]

[tool.pytest.ini_options]
addopts = "-ra"
