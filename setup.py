#!/usr/bin/env python3
"""
Setup script for fluentmail.

Install with `pip install .` or `pip install -e .`.
"""

import sys

if sys.version_info < (3, 11):
    sys.exit("Error: fluentmail requires Python 3.11 or higher.")

import re
from pathlib import Path

from setuptools import find_packages, setup

here = Path(__file__).parent

version_content = (here / "src" / "fluentmail" / "__version__.py").read_text(encoding="utf-8")
version_match = re.search(r'^__version__\s*=\s*["\']([^"\']+)["\']', version_content, re.M)
version = version_match.group(1) if version_match else "0.1.0"

readme_path = here / "README.md"
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")
    long_description_content_type = "text/markdown"
else:
    long_description = "Chainable builder for composing and sending MIME email"
    long_description_content_type = "text/plain"

# Core dependencies
install_requires = [
    "pydantic>=2.5.0",
    "pydantic-settings>=2.1.0",
    "aiosmtplib>=3.0.0",
]

# Development dependencies
extras_require = {
    "dev": [
        "pytest>=7.4.0",
        "pytest-cov>=4.1.0",
        "aiosmtpd>=1.4.4",
        "black>=23.0.0",
        "flake8>=6.1.0",
        "mypy>=1.7.0",
    ],
}
extras_require["test"] = extras_require["dev"]

setup(
    name="fluentmail",
    version=version,
    description="Chainable builder for composing and sending MIME email",
    long_description=long_description,
    long_description_content_type=long_description_content_type,
    author="fluentmail developers",
    license="MIT",
    python_requires=">=3.11",
    packages=find_packages("src"),
    package_dir={"": "src"},
    install_requires=install_requires,
    extras_require=extras_require,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Communications :: Email",
    ],
    keywords=["email", "mime", "smtp", "builder"],
)
