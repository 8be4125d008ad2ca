[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dosevasive"
version = "1.0.0"
description = "WSGI middleware that detects and blocks HTTP flooding and denial-of-service attempts"
requires-python = ">=3.10"
dependencies = []
keywords = ["wsgi", "middleware", "dos", "ddos", "rate-limiting", "blacklist", "security"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
    "Topic :: Security",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dosevasive"]

[tool.pytest.ini_options]
addopts = "-ra"
