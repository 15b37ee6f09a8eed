"""
Setup script for module-launcher
"""

from setuptools import setup, find_packages
import pathlib

# Read the README file
HERE = pathlib.Path(__file__).parent
README = (HERE / "README.md").read_text(encoding="utf-8")

# Basic setup configuration
setup(
    name="module-launcher",
    version="1.0.0",
    description="Run a module embedded or load it into a manager and supervise it",
    long_description=README,
    long_description_content_type="text/markdown",
    package_dir={"": "runtime"},
    packages=find_packages(where="runtime"),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.115.0",
        "httpx>=0.27.0",
        "pydantic>=2.11.0",
        "pydantic-settings>=2.12.0",
        "structlog>=24.1.0",
        "uvicorn>=0.34.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0.0",
            "pytest-asyncio>=0.24.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "module-launch=module_launcher.interfaces.cli.main:entry_point",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
        "License :: OSI Approved :: MIT License",
    ],
    keywords="module launcher supervisor lease heartbeat",
)
