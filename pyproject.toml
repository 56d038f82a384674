[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ecutune"
version = "1.0.0"
description = "Calibration map definitions, detection, map packs and bulk editing for ECU binary images"
requires-python = ">=3.10"
dependencies = []
keywords = ["ecu", "calibration", "tuning", "maps", "binary", "heuristics"]
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
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ecutune"]

[tool.pytest.ini_options]
addopts = "-ra"
