#!/usr/bin/env python
"""
MultiQC_SAVPlot aggregates Illumina InterOp run metrics into plot-ready
data: candle-stick summaries of tile metrics by lane and the Q-score
heatmap, as shown by Illumina's Sequencing Analysis Viewer application.
It ships a stand-alone command line tool and a MultiQC plugin.
"""

from setuptools import setup, find_packages

version = "0.1.0"

setup(
    name="multiqc_savplot",
    version=version,
    description="SAV plot data from Illumina InterOp metrics, with a MultiQC plugin",
    long_description=__doc__,
    keywords="bioinformatics illumina sequencing interop multiqc",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "interop>=1.1.23",
        "multiqc>=1.25",
        "pandas",
        "numpy",
        "click",
        "importlib_metadata",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "savplot = multiqc_savplot.cli:main",
        ],
        "multiqc.modules.v1": [
            "savplot = multiqc_savplot.modules.savplot:MultiqcModule",
        ],
        "multiqc.cli_options.v1": [
            "savplot_metric = multiqc_savplot.cli:savplot_metric",
        ],
        "multiqc.hooks.v1": [
            "execution_start = multiqc_savplot.multiqc_savplot:savplot_execution_start",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Environment :: Web Environment",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: POSIX",
        "Operating System :: Unix",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Topic :: Scientific/Engineering :: Visualization",
    ],
)
