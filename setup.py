from setuptools import setup, find_packages
import os


def read(fname):
    return open(os.path.join(os.path.dirname(__file__), fname)).read()


def version():
    # read without importing the package, which needs torch
    scope = {}
    exec(read(os.path.join("photomodel", "_version.py")), scope)
    return scope["version"]


setup(
    name="photomodel",
    version=version(),
    description="Composable parametric brightness profile models evaluated on astronomical image grids",
    long_description=read("README.md"),
    long_description_content_type="text/markdown",
    license="GPL-3.0 license",
    packages=find_packages(include=["photomodel", "photomodel.*"]),
    install_requires=[
        "scipy",
        "numpy",
        "torch",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Development Status :: 1 - Planning",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Programming Language :: Python :: 3",
    ],
)
