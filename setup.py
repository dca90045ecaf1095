from setuptools import find_packages, setup

setup(
    name="datapoint_engine",
    version="0.1.0",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.10",
    install_requires=[
        "fastapi~=0.116",
        "uvicorn~=0.35",
        "httpx~=0.28",
        "pydantic~=2.11",
        "python-dotenv~=1.1",
        "python-multipart~=0.0.20",
        "pinecone~=7.3",
    ],
    extras_require={
        # Local dev & CI tools
        "dev": [
            "pytest~=8.4",
            "pytest-cov~=5.0",
            "ruff~=0.13",
            "mypy~=1.11",
        ],
    },
    include_package_data=True,
)
