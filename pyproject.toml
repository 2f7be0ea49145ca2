[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hostsprofiles"
version = "0.1.1"
description = "Manage hosts-file entries through named, switchable profiles stored in SQLite"
requires-python = ">=3.10"
dependencies = [
    "platformdirs",
]
keywords = ["hosts", "etc-hosts", "profiles", "dns", "sysadmin", "tkinter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: System Administrators",
    "Natural Language :: Italian",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
hostsprofiles = "hostsprofiles.gui:main"

[tool.hatch.build.targets.wheel]
packages = ["hostsprofiles"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
