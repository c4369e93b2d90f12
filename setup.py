"""
Setup script for the netbuild package.
"""
from setuptools import setup, find_packages

setup(
    name="netbuild",
    version="0.1.0",
    description="Build orchestration for .NET applications: a task graph driving MSBuild, MSpec, NCover and friends",
    author="netbuild developers",
    author_email="dev@example.com",
    url="https://github.com/example/netbuild",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click>=8.0",
        "PyYAML>=5.4",
        "Jinja2>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "netbuild=netbuild.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Build Tools",
    ],
)
