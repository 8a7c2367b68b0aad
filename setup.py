from pathlib import Path

from setuptools import find_packages, setup

BASE_DIR = Path(__file__).parent
README = (BASE_DIR / "README.md").read_text(encoding="utf-8")

setup(
    name="quantum-snapshot-stats",
    version="0.1.0",
    description="Shot-averaged statistics of snapshotted quantum state vectors",
    long_description=README,
    long_description_content_type="text/markdown",
    author="Local Quantum Lab",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "qiskit>=1.0.0",
        "numpy>=1.24.0",
        "PyYAML>=6.0",
        "click>=8.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0"],
    },
    python_requires=">=3.9",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Physics",
    ],
    entry_points={
        'console_scripts': [
            'qss=quantum_snapshot_stats.cli:cli',
        ],
    },
)
