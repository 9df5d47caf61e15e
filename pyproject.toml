[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gazetteer-parser"
version = "0.9.0"
description = "Gazetteer-based entity parser that finds and resolves entity values inside written queries"
requires-python = ">=3.10"
dependencies = [
    "msgpack",
]
keywords = ["gazetteer", "entity", "parser", "nlp", "entity-resolution", "slot-filling"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Linguistic",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gazetteer_parser"]

[tool.hatch.build.targets.sdist]
include = [
    "gazetteer_parser",
    "tests",
]

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
