from setuptools import setup, find_packages

setup(
    name="gridpath",
    version="1.0.0",
    packages=find_packages(include=["gridpath", "gridpath.*"]),
    install_requires=[
        "numpy>=1.21.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    author="gridpath developers",
    description="A* pathfinding on 2D/3D tile and voxel grids with ledge and corner-cutting rules",
    python_requires=">=3.8",
)
