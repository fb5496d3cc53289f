[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stxkit"
version = "1.0.0"
description = "Owned strings, capacity-tracking vectors, reference-counted resources and a starvation-aware task timeline"
requires-python = ">=3.10"
dependencies = []
keywords = ["vec", "string", "reference-counting", "scheduler", "timeline", "thread-slot"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["stxkit"]

[tool.pytest.ini_options]
addopts = "-ra"
