# setup.py
from setuptools import setup, find_packages

setup(
    name="salesboard",
    version="0.1.0",
    description="Seed a SQLite store with product sales and serve dashboard statistics over HTTP",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "click>=7.0",
        "pyyaml>=5.3",
        "python-dotenv>=0.19",
        "requests>=2.25",
        "fastapi>=0.100",
        "uvicorn>=0.20",
        "anyio>=4.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "salesboard=sales_tracker.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
