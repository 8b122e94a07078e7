[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fzfcore"
version = "0.57.0"
description = "Fuzzy matching, ANSI color extraction, chunked item storage and query history for command-line finders"
requires-python = ">=3.10"
dependencies = []
keywords = ["fuzzy", "finder", "matching", "ansi", "filter", "search"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Filters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fzfcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
