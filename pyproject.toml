[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "propmodel"
version = "0.1.0"
description = "Property models: multi-way dataflow constraints kept consistent by the DeltaBlue incremental solver"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "constraints",
    "constraint-solver",
    "deltablue",
    "property-model",
    "dataflow",
    "multi-way-constraints",
]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
propmodel = "propmodel.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["propmodel"]

[tool.hatch.build.targets.sdist]
include = ["propmodel", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
