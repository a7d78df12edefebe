"""
Setup script for the community-hub data layer.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="community-hub",
    version="2.0.0",
    packages=find_packages(include=["community_hub", "community_hub.*"]),
    python_requires=">=3.11",
    install_requires=[
        "httpx>=0.27",
        "tenacity>=8.2",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "python-dotenv>=1.0",
        "pandas>=2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
)
