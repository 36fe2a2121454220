[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scopview"
version = "0.1.0"
description = "Wavefront OBJ/MTL loading, BMP decoding, mesh buffers, arcball camera, scene logic and a text-editing state machine for a small 3D viewer"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "obj",
    "wavefront",
    "mtl",
    "bmp",
    "3d",
    "viewer",
    "arcball",
    "mesh",
    "text-editing",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Viewers",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["scopview"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
