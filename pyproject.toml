[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "servicekit"
version = "0.1.0"
description = "Layered service toolkit: domain entities, SQL, Redis and Kafka-style repositories, use cases, JWT auth, PDF invoices and a Flask HTTP API"
requires-python = ">=3.10"
keywords = ["flask", "wsgi", "kafka", "redis", "sqlalchemy", "jwt", "invoice", "pdf", "clean-architecture"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Office/Business :: Financial",
]
dependencies = [
    "flask",
    "pyjwt",
    "redis",
    "sqlalchemy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
servicekit-invoice-demo = "servicekit.invoice_demo:main"

[tool.hatch.build.targets.wheel]
packages = ["servicekit"]

[tool.hatch.build.targets.sdist]
include = ["servicekit", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
