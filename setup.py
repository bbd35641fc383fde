# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Setup configuration for the FieldOps messaging adapters."""

from pathlib import Path

from setuptools import setup

# Read the README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

ADAPTERS = [
    "fieldops_config",
    "fieldops_directory",
    "fieldops_logging",
    "fieldops_metrics",
    "fieldops_notifications",
    "fieldops_reporting",
    "fieldops_storage",
]

setup(
    name="fieldops-messaging",
    version="0.1.0",
    author="FieldOps Contributors",
    description="Internal messaging service and shared adapters for FieldOps",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=ADAPTERS,
    package_dir={name: f"adapters/{name}/{name}" for name in ADAPTERS},
    package_data={"fieldops_config": ["schemas/*.json"]},
    include_package_data=True,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.110.0",  # REST binding
        "uvicorn>=0.27.0",  # ASGI server
        "pydantic>=2.0.0",  # Request models
        "pymongo>=4.6.3",  # MongoDB client
        "requests>=2.31.0",  # Webhook notifications
        "prometheus-client>=0.19.0",  # Prometheus metrics
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pylint>=3.0.0",
            "mypy>=1.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "httpx>=0.25.0",  # fastapi TestClient
        ],
    },
)
