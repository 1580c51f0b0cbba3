"""
Setup file for the Mock Interviewer package.
"""
from setuptools import setup, find_packages

setup(
    name="mock_interviewer",
    version="0.1.0",
    packages=find_packages(include=["mock_interviewer", "mock_interviewer.*"]),
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "slowapi>=0.1.9",
        "pydantic>=2.5.2",
        "python-dotenv>=1.0.0",
        "langchain-core>=0.2.0",
        "langchain-google-genai>=1.0.0",
        "langchain-chroma>=0.1.0",
        "langchain-text-splitters>=0.2.0",
        "chromadb>=0.5.0",
        "pymongo>=4.6.0",
        "click>=8.1.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mock-interviewer=mock_interviewer.cli:cli",
        ],
    },
    python_requires=">=3.9",
    author="Mock Interviewer Team",
    author_email="your.email@example.com",
    description="AI-driven mock technical interviews for DevOps, SRE and cloud roles",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
)
