[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pathscene"
version = "0.1.0"
description = "Building blocks for a path tracer: Wavefront OBJ/MTL loading, triangle and sphere primitives, a perspective camera and PFM output"
requires-python = ">=3.10"
keywords = ["path tracing", "wavefront obj", "mtl", "pfm", "ray tracing", "camera", "triangle"]
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
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Typing :: Typed",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pathscene"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
