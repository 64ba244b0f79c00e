[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ifupdown-ng"
version = "0.11.3"
description = "Network interface configuration management: bring interfaces up and down, query and redisplay /etc/network/interfaces"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ifupdown",
    "ifup",
    "ifdown",
    "ifquery",
    "network",
    "interfaces",
    "networking",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ifupdown = "ifupdown_ng.multicall:main"
ifup = "ifupdown_ng.multicall:main"
ifdown = "ifupdown_ng.multicall:main"
ifquery = "ifupdown_ng.multicall:main"
ifparse = "ifupdown_ng.multicall:main"
ifctrstat = "ifupdown_ng.multicall:main"

[tool.hatch.build.targets.wheel]
packages = ["ifupdown_ng"]

[tool.hatch.build.targets.sdist]
include = ["ifupdown_ng", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
