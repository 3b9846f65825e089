# setup.py
from setuptools import setup, find_packages

setup(
    name="dat_analyzer",
    version="0.1.0",
    packages=find_packages(include=["dat_analyzer", "dat_analyzer.*"]),
    install_requires=[
        "construct>=2.10",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    python_requires=">=3.8",
    description="A tool for decoding LithTech world (.dat) files",
    keywords="lithtech, dat, world, analysis",
    entry_points={
        'console_scripts': [
            'analyze-dat=dat_analyzer.main:main',
        ],
    }
)
