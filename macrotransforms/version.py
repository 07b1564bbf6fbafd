# macrotransforms/version.py
"""
macro-transforms Version Information

This module contains version information and package metadata. It centralizes
version tracking, making it accessible programmatically via
macrotransforms.__version__.

macro-transforms follows semantic versioning (MAJOR.MINOR.PATCH):
- MAJOR: Incompatible API changes
- MINOR: Backwards-compatible functionality additions
- PATCH: Backwards-compatible bug fixes
"""

# Version components
VERSION_MAJOR = 1
VERSION_MINOR = 0
VERSION_PATCH = 0

# Full version string
__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

# Package metadata
__title__ = "macro-transforms"
__description__ = "Hodrick-Prescott filtering and macroeconomic data transforms"
__license__ = "MIT"

# Python version requirements
__python_requires__ = ">=3.10"

# Package dependencies
__dependencies__ = {
    "numpy": ">=1.26.0",
    "scipy": ">=1.11.3",
    "pandas": ">=2.1.1",
    "numba": ">=0.58.0",
    "matplotlib": ">=3.8.0",
}
