# pylint: disable=missing-module-docstring
# ruff: noqa

from pathlib import Path

from setuptools import find_packages, setup


def read_long_description() -> str:
    """Return README contents for PyPI description."""
    readme_path = Path(__file__).with_name("README.md")
    return readme_path.read_text(encoding="utf-8") if readme_path.exists() else "Trends Bot"


setup(
    name="trends-bot",
    version="0.1.0",
    description="Twitter bot that DMs subscribers a digest of trending topics per region",
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    python_requires=">=3.11",
    packages=find_packages(
        include=[
            "trends_bot",
            "trends_bot.*",
            "subscription_engine",
            "subscription_engine.*",
            "fetchers",
            "fetchers.*",
            "scripts",
            "scripts.*",
        ]
    ),
    include_package_data=True,
    install_requires=[
        "httpx>=0.26",
        "pandas>=2.0",
        "pydantic>=2.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "trends-bot = trends_bot.cli_entrypoints:run",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
