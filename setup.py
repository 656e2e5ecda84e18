#================================================================================
# Setup.py - Traditional Python Package Setup
# ================================================================================
# Install with: pip install -e .
# Tests:        pip install -e ".[dev]"
# Real models:  pip install -e ".[huggingface]"
#

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="ingestkit",
    version="0.1.0",
    author="Your Team",
    author_email="team@example.com",
    description="Async document ingestion pipeline with cached transformations and docstore dedup",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/your-org/ingestkit",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Text Processing :: Indexing",
    ],
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.4.0",
        "pydantic-settings>=2.0.0",
        "redis[asyncio]>=5.0.1",
        "qdrant-client>=1.10.0",
        "numpy>=1.24.0",
        "chardet>=5.0.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "huggingface": [
            "torch>=2.0.0",
            "transformers>=4.30.0",
            "sentence-transformers>=2.2.0",
        ],
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ingestkit=ingestkit.cli:main",
        ],
    },
)
