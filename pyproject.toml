[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "colstore"
version = "0.1.0"
description = "Column-store building blocks: XML schemas, typed values and soft-deleted column files"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "column-store", "schema", "xml", "storage"]
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
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["colstore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
