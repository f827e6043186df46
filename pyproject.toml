[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nanohubctl"
version = "1.0.3"
description = "A command line tool and client for the NanoHUB DDM and NanoCMD APIs"
requires-python = ">=3.10"
keywords = ["mdm", "ddm", "declarative device management", "nanohub", "nanocmd"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "requests>=2.28",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "responses>=0.23",
]

[project.scripts]
nanohubctl = "nanohubctl.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["nanohubctl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
