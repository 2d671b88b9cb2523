[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "videopipe"
version = "0.1.0"
description = "Building blocks for video pipelines: tensors, pooled buffers, recording tasks, logging and file utilities"
requires-python = ">=3.10"
keywords = ["video", "pipeline", "tensor", "allocator", "logging", "recording", "affine"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["videopipe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
