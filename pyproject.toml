[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fqtrim"
version = "0.1.0"
description = "FASTQ read records, pair overlap and merging, polyG/polyX tail trimming, option validation and per-cycle quality statistics"
requires-python = ">=3.10"
dependencies = []
keywords = ["fastq", "sequencing", "trimming", "quality-control", "bioinformatics", "ngs"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fqtrim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
