[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voltlift"
version = "0.1.0"
description = "Search for regular graphs of large girth as lifts of voltage-assigned multigraphs over finite groups"
requires-python = ">=3.10"
dependencies = []
keywords = ["graph theory", "voltage graph", "lift", "girth", "cage", "finite group"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["voltlift"]

[tool.pytest.ini_options]
addopts = "-ra"
