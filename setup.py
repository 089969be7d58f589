# setup.py
from setuptools import find_packages, setup

setup(
    name="photo-places",
    version="0.1.0",
    packages=find_packages(include=["photo_places", "photo_places.*"]),
    python_requires=">=3.10",
    install_requires=[
        "httpx>=0.25",
        "structlog>=23.1",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["photo-places=photo_places.cli:main"],
    },
)
