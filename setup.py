"""Package metadata for the note CLI (src layout, console script `note`)."""

from setuptools import find_packages, setup

setup(
    name="note",
    version="0.1.0",
    description="CLI note taking with a hierarchical manifest over flat markdown files",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "click>=8.1",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["note=note.cli:main"],
    },
)
