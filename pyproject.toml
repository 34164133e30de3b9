[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "micaprof"
version = "0.1.0"
description = "Microarchitecture-independent workload characterisation from event streams: reuse distance, memory footprint, register traffic, strides, branch predictability and instruction mix."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "profiling",
    "workload characterization",
    "reuse distance",
    "branch prediction",
    "instruction mix",
    "memory footprint",
    "stride",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
    "Topic :: System :: Benchmark",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["micaprof"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
