[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "kiops"
version = "0.1.0"
description = "Tools for KiCad s-expression files and device tree sources: parse, query, convert to JSON, edit, merge and split."
requires-python = ">=3.10"
dependencies = []
keywords = ["kicad", "s-expression", "device-tree", "dts", "eda", "symbol-library"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
    "Topic :: Text Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dts_parse = "kiops.cli:dts_parse"
dts_parse_sama5d27 = "kiops.cli:dts_parse_sama5d27"
ki_edit = "kiops.cli:ki_edit"
ki_merge = "kiops.cli:ki_merge"
ki_parse = "kiops.cli:ki_parse"
ki_split = "kiops.cli:ki_split"

[tool.setuptools.packages.find]
include = ["kiops*"]

[tool.pytest.ini_options]
addopts = "-ra"
