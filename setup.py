import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="solvefield",
    version="0.1.0",
    author="solvefield developers",
    description="Batch astrometric solving of images and coordinate lists "
    "with the astrometry.net programs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    keywords="astronomy astrometry image",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires='>=3.11',
    install_requires=[
        "astropy",
        "numpy",
        "pydantic>=2",
    ],
    extras_require={
        "test": [
            "coverage",
            "coveralls",
            "pytest",
        ]
    },
    entry_points={
        "console_scripts": [
            "solvefield=solvefield.__main__:main",
        ]
    },
)
