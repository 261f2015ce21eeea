from setuptools import setup, find_packages

setup(
    name="oilgas-etl",
    version="0.1.0",
    description="Daily oil & gas well production CSV ETL",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"oilgas_etl.infrastructure": ["operations/*.sql"]},
    include_package_data=True,
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "duckdb>=0.10",
        "polars>=1.0",
        "python-dotenv"
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio"
        ]
    },
    entry_points={
        "console_scripts": [
            "oilgas-etl=oilgas_etl.main:main",
        ]
    },
    python_requires=">=3.9",
)
