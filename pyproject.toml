[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mlpim"
version = "0.1.0"
description = "Small multilayer perceptron kernels for training and inference, sequential and partitioned across simulated processing-in-memory units"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["mlp", "neural-network", "processing-in-memory", "matrix", "iris", "inference"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mlpim = "mlpim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mlpim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
