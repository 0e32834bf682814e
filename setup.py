"""Setup file for development installation."""

from setuptools import setup, find_packages

setup(
    name="capi-chat",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.27",
        "pydantic>=2.0",
        "structlog>=23.1",
    ],
    extras_require={
        "test": [
            "fastapi>=0.100",
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
)
