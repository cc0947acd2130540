[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "langactor"
version = "0.1.0"
description = "A small in-process actor framework: addressable actors with mailboxes, backpressure policies, parent/child trees and an address book."
requires-python = ">=3.10"
dependencies = []
keywords = ["actor", "actor-model", "concurrency", "mailbox", "backpressure", "messaging"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
langactor-calculator = "langactor.examples.calculator:main"
langactor-echo = "langactor.examples.echo:main"
langactor-echowithchild = "langactor.examples.echowithchild:main"
langactor-pingpong = "langactor.examples.pingpong:main"
langactor-selfpingpong = "langactor.examples.selfpingpong:main"
langactor-sort = "langactor.examples.sort:main"

[tool.hatch.build.targets.wheel]
packages = ["langactor"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
