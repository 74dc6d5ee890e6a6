[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "unifiedlog"
version = "0.5.1"
description = "Parsers for macOS Unified Log catalog and firehose structures"
requires-python = ">=3.10"
dependencies = []
keywords = ["forensics", "macos", "unifiedlog", "tracev3", "firehose", "logging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Information Technology",
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

[tool.hatch.build.targets.wheel]
packages = ["unifiedlog"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
