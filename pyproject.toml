[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ompcore"
version = "0.1.0"
description = "Core building blocks for a scene-based application: a JSON document type, thread-safe containers, a work-stealing thread pool, undoable commands, a camera and a file-backed asset system."
requires-python = ">=3.10"
dependencies = []
keywords = ["assets", "thread-pool", "json", "camera", "undo", "work-stealing"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ompcore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
