[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "corevm"
version = "0.1.0"
description = "A Core War virtual machine that loads compiled champions and runs them against each other"
requires-python = ">=3.10"
dependencies = []
keywords = ["corewar", "virtual machine", "simulation", "game"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
corevm = "corevm.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["corevm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
