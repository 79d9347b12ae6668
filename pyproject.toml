[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bandscan"
version = "0.1.0"
description = "Band-power scanning of sampled signals with windowed FIR filters, plus small threading examples"
requires-python = ">=3.10"
dependencies = []
keywords = ["signal processing", "fir", "band pass", "butterworth", "threads"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
band-scan = "bandscan.cli:main"
parallel-sum = "bandscan.parallel_sum:main"
thread-demo = "bandscan.thread_demo:main"

[tool.hatch.build.targets.wheel]
packages = ["bandscan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
