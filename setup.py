"""Setup script for hashvault."""
from setuptools import setup, find_packages

setup(
    name="hashvault",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["cli"],
    install_requires=[
        "flask",
        "requests",
        "sqlalchemy",
        "pydantic",
        "boto3",
        "python-dotenv",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "hashvault=cli:main",
        ],
    },
    python_requires=">=3.10",
)
