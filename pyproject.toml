[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sodiumlib"
version = "0.1.0"
description = "Kernel-style helpers: integer and float text conversions, C-string utilities and first-fit heap allocators"
requires-python = ">=3.10"
dependencies = []
keywords = ["allocator", "heap", "malloc", "first-fit", "itoa", "ftoa", "atof", "string formatting"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
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

[tool.hatch.build.targets.wheel]
packages = ["sodiumlib"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
