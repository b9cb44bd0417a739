from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="numpart",
    version="0.1.0",
    description="Multi-way number partitioning as a mixed-integer linear program.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"numpart.schemas": ["*.json"]},
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "scipy>=1.9",
        "pyyaml",
        "jsonschema",
    ],
    extras_require={"test": ["pytest"]},
)
