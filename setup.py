"""
Setup script for the GitHub CTC estimator.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_namespace_packages

setup(
    name="github-ctc-estimator",
    version="0.1.0",
    packages=find_namespace_packages(include=["src*", "estimator_service*"]),
    python_requires=">=3.11",
    install_requires=[
        "python-dotenv",
        "requests",
        "python-dateutil",
        "pymongo",
        "langchain-core",
        "langchain-google-genai",
        "fastapi<0.137",
        "uvicorn",
        "pydantic>=2",
        "pydantic-settings",
        "typing_extensions",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
