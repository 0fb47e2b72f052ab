[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "icdr"
version = "0.1.0"
description = "Building blocks of a compressed inverted index: bit-level codes, posting lists, a hashed lexicon and BM25 posting traversal"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "inverted index",
    "information retrieval",
    "bm25",
    "variable byte",
    "elias gamma",
    "elias delta",
    "posting list",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Indexing",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["icdr"]

[tool.pytest.ini_options]
addopts = "-ra"
