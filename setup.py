"""Setup script for gkquad.

Install with: pip install .
Install with dev dependencies: pip install .[dev]
"""

from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="gkquad",
    version="0.1.0",
    description="Adaptive Gauss-Kronrod quadrature for one-dimensional integrands",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    keywords=[
        "pytorch",
        "numerical-integration",
        "quadrature",
        "gauss-kronrod",
        "adaptive",
    ],
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "gkquad": ["py.typed"],  # Include type hints
    },
    include_package_data=True,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    python_requires=">=3.11",
    install_requires=[
        "torch>=2.0.0,<3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=8.0.0,<9.0.0",
            "pytest-cov>=6.0.0,<7.0.0",
            "ruff>=0.9.0,<1.0.0",
        ],
    },
)
