"""Setup configuration for leadtime"""

from setuptools import setup, find_packages

setup(
    name="gh-team-lead-time",
    version="0.1.0",
    description=(
        "CLI tool for GitHub team pull request lead time: first commit to merge, "
        "aggregated overall and per calendar period."
    ),
    author="GH Team Lead Time Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
        "python-dateutil>=2.8.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "gh-team-lead-time=leadtime.main:main",
        ],
    },
)
