# setup.py
from setuptools import setup, find_packages

setup(
    name="spec-validator",            # the *distribution* name on PyPI
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),  # will find spec_validator/
    install_requires=["pandas"],      # date helpers are built on pandas.Timestamp
    extras_require={"test": ["pytest"]},
    python_requires=">=3.8",
    description="Specification-driven validator for name/attributes/children item trees",
    author="Your Name",
    license="Creative Commons Attribution-NonCommercial-ShareAlike 4.0 International License",
)
