from pathlib import Path

from setuptools import find_packages, setup


def read_requirements(path):
    return [
        line
        for line in Path(path).read_text().splitlines()
        if line and not line.startswith("#")
    ]


base_reqs = read_requirements("requirements/core.txt")
dev_reqs = read_requirements("requirements/dev.txt")

with open("README.md") as fh:
    LONG_DESCRIPTION = fh.read()


setup(
    name="ndtw",
    version="0.3.0",
    description="Constrained, multivariate Dynamic Time Warping for numpy, pandas and xarray.",
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(exclude=["ndtw.tests", "ndtw.tests.*"]),
    install_requires=base_reqs,
    extras_require={"dev": dev_reqs},
    zip_safe=False,
    python_requires=">=3.9",
    classifiers=[
        "Intended Audience :: Science/Research",
        "Intended Audience :: Developers",
        "Programming Language :: Python",
        "Topic :: Software Development",
        "Topic :: Scientific/Engineering",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: POSIX",
        "Operating System :: Unix",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="time series dynamic time warping dtw alignment",
)
