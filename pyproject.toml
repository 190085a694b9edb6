[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sprest"
version = "0.1.0"
description = "Fluent client helpers for the SharePoint REST API: OData modifiers, payload normalisation, permissions, search, profiles, taxonomy responses and more"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "sharepoint",
    "rest",
    "odata",
    "csom",
    "taxonomy",
    "permissions",
    "search",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sprest"]

[tool.hatch.build.targets.sdist]
include = ["sprest", "tests", "pyproject.toml"]

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
