"""Setup configuration for Discrepancies - Archive vs. Working Directory Comparison Tool."""

from setuptools import setup, find_packages
import os
import re


def read_requirements():
    """
    Return the non-empty, non-comment lines of requirements.txt next to this file.
    """
    requirements_path = os.path.join(os.path.dirname(__file__), "requirements.txt")
    with open(requirements_path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]


def read_readme():
    """
    Return the contents of README.md, or an empty string when it is missing.
    """
    readme_path = os.path.join(os.path.dirname(__file__), "README.md")
    if os.path.exists(readme_path):
        with open(readme_path, "r", encoding="utf-8") as f:
            return f.read()
    return ""


# Version lives in discrepancies/cli.py
def read_version():
    """
    Extract the top-level __version__ assignment from discrepancies/cli.py.

    Raises:
        RuntimeError: If no __version__ assignment is found.
    """
    cli_path = os.path.join(os.path.dirname(__file__), "discrepancies", "cli.py")
    with open(cli_path, "r", encoding="utf-8") as f:
        content = f.read()
    match = re.search(r'^__version__\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE)
    if match:
        return match.group(1)
    raise RuntimeError("Unable to find __version__ in discrepancies/cli.py")


setup(
    name="discrepancies",
    version=read_version(),
    description="Compare a ZIP archive against a working directory and export the differences",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    author="Discrepancies Team",
    license="MIT",
    python_requires=">=3.9",
    install_requires=read_requirements(),
    extras_require={
        "test": ["pytest>=7.0"],
    },
    packages=find_packages(exclude=["tests", "tests.*"]),
    entry_points={
        "console_scripts": [
            "discrepancies=discrepancies.cli:app",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Archiving",
        "Topic :: Utilities",
    ],
    keywords="zip archive diff compare export working-directory",
)
