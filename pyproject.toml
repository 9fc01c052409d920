[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shapecraft"
version = "0.1.0"
description = "Model layered quadrant shapes, test whether they can be built, and explain how to build them"
requires-python = ">=3.10"
dependencies = []
keywords = ["shapes", "puzzle", "solver", "stacking", "quadrants"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Puzzle Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
shapecraft-parser = "shapecraft.parser:main"

[tool.hatch.build.targets.wheel]
packages = ["shapecraft"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
