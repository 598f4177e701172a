"""Setup configuration for the MPEx client package."""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="mpex-client",
    version="0.1.0",
    author="MPEx Client Contributors",
    description="Command-line client for signed and encrypted MPEx orders",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.11",
    install_requires=[
        "requests>=2.32.3",
        "pydantic>=2.7",
        "python-gnupg>=0.5.2",
    ],
    extras_require={
        "dev": [
            "pytest>=8.3.3",
            "pytest-cov>=5.0.0",
            "mypy>=1.11.2",
            "black>=24.8.0",
            "ruff>=0.6.9",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Office/Business :: Financial :: Investment",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
    ],
    entry_points={
        "console_scripts": [
            "mpex=mpex_client.cli.mpex_cli:main",
        ],
    },
)
