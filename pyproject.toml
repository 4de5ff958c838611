[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lvlogs"
version = "0.1.0"
description = "Levelled logging with plain or JSON encoding, console/file output, size-based rotation and optional asynchronous writes"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "logger", "rotation", "log-levels", "json"]
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
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lvlogs-demo = "lvlogs.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["lvlogs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
