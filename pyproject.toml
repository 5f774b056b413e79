[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nachos"
version = "0.1.0"
description = "Teaching toolkit: stack and list examples, MIPS COFF/NOFF tools, a MIPS interpreter and a fixed-size directory table"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "education",
    "operating-systems",
    "mips",
    "coff",
    "noff",
    "disassembler",
    "interpreter",
    "stack",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: Software Development :: Disassemblers",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nachos-stacks = "nachos.stacks:main"
nachos-bounded = "nachos.bounded:main"
nachos-coff2noff = "nachos.coff2noff:main"
nachos-coff2flat = "nachos.coff2flat:main"
nachos-disasm = "nachos.disasmtool:main"
nachos-interp = "nachos.interp:main"

[tool.hatch.build.targets.wheel]
packages = ["nachos"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
