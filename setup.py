"""
Setup script for pdf-generator project.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="pdf-generator",
    version="0.1.0",
    packages=find_packages(include=["pdf_generator", "pdf_generator.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.27",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "python-dotenv>=1.0",
        "httpx>=0.27",
        "websockets>=13.0",
        "playwright>=1.40",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "pdf-generator=pdf_generator.__main__:main",
        ],
    },
)
