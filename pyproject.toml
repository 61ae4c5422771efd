[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "snapctl"
version = "1.0.0"
description = "A command-line tool for managing Snapcast servers"
requires-python = ">=3.10"
keywords = ["snapcast", "audio", "multiroom", "jsonrpc", "websocket", "cli"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio",
]
dependencies = [
    "websocket-client>=1.6",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
snapctl = "snapctl.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["snapctl"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
