[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "repoquery"
version = "0.1.0"
description = "SQL functions and table-valued queries over GitHub, Sourcegraph, npm and common config formats, backed by SQLite"
requires-python = ">=3.11"
keywords = [
    "sqlite",
    "sql",
    "git",
    "github",
    "sourcegraph",
    "npm",
    "go.mod",
    "toml",
    "yaml",
    "xml",
    "json",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
    "Topic :: Software Development :: Version Control :: Git",
    "Typing :: Typed",
]
dependencies = [
    "requests",
    "pyyaml",
    "tabulate",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["repoquery"]

[tool.hatch.build.targets.sdist]
include = ["repoquery", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
