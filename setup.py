from setuptools import setup, find_packages


setup(
    name="kmzfile",
    version="0.1",
    packages=find_packages(include=["kmzfile", "kmzfile.*"]),
    description="Read/write access to KMZ and other ZIP entry containers with ordered tables and safe paths.",
    python_requires=">=3.8",
    install_requires=[
        "zstandard>=0.22.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
