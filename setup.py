from setuptools import setup, find_packages

setup(
    name="symtree",
    version="0.1.0",
    description="symtree — symbolic execution trees and assertion counterexamples",
    packages=find_packages(include=["symtree", "symtree.*"]),
    python_requires=">=3.10",
    install_requires=[
        "z3-solver>=4.12.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "tests": [
            "pytest>=7.0",
            "hypothesis>=6.0",
        ],
    },
)
