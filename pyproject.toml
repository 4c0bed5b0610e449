[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coursetools"
version = "0.1.0"
description = "An LC-3 virtual machine with object and symbol file helpers, small Unix-style text utilities, a printf formatter, a Park-Miller generator and a shell command parser"
requires-python = ">=3.10"
dependencies = []
keywords = ["lc3", "emulator", "virtual-machine", "grep", "wc", "printf", "shell", "parser"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Education",
    "Topic :: Text Processing :: Filters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lc3vm = "coursetools.lc3vm:main"
ct-grep = "coursetools.grep:main"
ct-cat = "coursetools.textutils:cat_main"
ct-echo = "coursetools.textutils:echo_main"
ct-wc = "coursetools.textutils:wc_main"

[tool.hatch.build.targets.wheel]
packages = ["coursetools"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
