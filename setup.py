# setup.py
from setuptools import setup, find_packages

setup(
    name="urbanswap",            # Package name
    version="0.1",               # Version
    packages=find_packages(exclude=("test", "test.*")),
    install_requires=[           # External dependencies
        "fastapi",
        "uvicorn",
        "asyncpg",
        "pydantic[email]>=2",
        "python-multipart",
        "python-jose[cryptography]",
        "bcrypt",
        "slowapi",
        "google-cloud-storage",
        "Pillow",
        "python-dotenv",
        "httpx",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "polyfactory",
        ],
    },
    python_requires=">=3.10",
)
