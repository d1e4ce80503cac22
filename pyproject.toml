[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "verkehrssim"
version = "0.1.0"
description = "Discrete-time road traffic simulation with cars, bicycles, roads and an optional graphics client"
requires-python = ">=3.10"
dependencies = []
keywords = ["traffic", "simulation", "vehicles", "roads", "discrete-time"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
verkehrssim = "verkehrssim.scenarios:main"

[tool.hatch.build.targets.wheel]
packages = ["verkehrssim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
