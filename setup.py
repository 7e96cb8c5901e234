from setuptools import setup, find_packages

setup(
    name="entity-repository",
    version="0.1.0",
    description="Repository pattern and repository generator for SQLAlchemy models",
    packages=find_packages(include=["entity_repository", "entity_repository.*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "sqlalchemy>=2.0",
        "pydantic-settings>=2.0",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "entity-repository=entity_repository.cli:main",
        ],
    },
)
