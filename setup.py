from setuptools import setup, find_packages

setup(
    name="datagrid_renderer",
    version="0.1.0",
    packages=find_packages(include=["datagrid", "datagrid.*"]),
    install_requires=[
        "pydantic",
        "pydantic-settings",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
        ],
    },
    python_requires=">=3.8",
)
