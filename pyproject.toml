[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "loquat"
version = "0.1.0"
description = "Messaging adapters, channel bookkeeping and aspect-oriented hooks for chat bots"
requires-python = ">=3.10"
dependencies = []
keywords = ["chat", "bot", "adapters", "aop", "aspects", "messaging"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Communications :: Chat",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["loquat"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
