[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spawngroups"
version = "2.0.0"
description = "Structured concurrency: spawn, await and cancel groups of child tasks"
requires-python = ">=3.10"
dependencies = []
keywords = ["concurrency", "structured-concurrency", "async", "task-group", "threadpool"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["spawngroups"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
