#!/usr/bin/env python

from setuptools import setup, find_packages
import os

with open("README.md", "r") as fh:
    long_description = fh.read()

# Automatically find all scripts in the scripts directory
def get_scripts():
    scripts_dir = 'scripts'
    if os.path.exists(scripts_dir):
        scripts = []
        for file in os.listdir(scripts_dir):
            if not file.startswith('.') and not file.startswith('__'):
                # Include all files except hidden files and Python cache
                file_path = os.path.join(scripts_dir, file)
                if os.path.isfile(file_path):
                    scripts.append(file_path)
        return scripts
    return []

setup(
    name="cvmcount",
    version="0.1.0",
    description="Streaming distinct-element estimation with the CVM algorithm",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    scripts=get_scripts(),  # Automatically include all scripts
    python_requires='>=3.8',
    install_requires=[
        "numpy",
        "matplotlib",
        "scipy",
        "xxhash>=1.4.0",  # Required for add_string/add_int hashing
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'black>=22.0.0',
            'isort>=5.0.0',
            'mypy>=0.900',
        ],
    },
    entry_points={
        'console_scripts': [
            'cvmcount=cvmcount.cvmcount:main',
        ],
    },
)
