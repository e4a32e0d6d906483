from setuptools import find_packages, setup

setup(
    name="seqphylo",
    version="0.1.0",
    description=(
        "Pairwise sequence alignment and distance based phylogenetic trees"
    ),
    author="Patrick Kunzmann",
    license="BSD-3-Clause",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"": ["*.pyi"]},
    python_requires=">=3.10",
    install_requires=["numpy >= 1.25"],
    extras_require={
        "test": ["pytest"],
        "bench": ["pytest", "pytest-codspeed"],
    },
)
