"""
setuptools script for the hallway_nav_sim package.

Package metadata is read from ``hallway_nav_sim/config/constants.yaml`` and
dependencies from the requirements files, so the package is never imported
during the build.
"""

import pathlib

import setuptools

HERE = pathlib.Path(__file__).parent
PACKAGE_DIR = HERE / "hallway_nav_sim"
CONSTANTS_PATH = PACKAGE_DIR / "config" / "constants.yaml"
README_PATH = HERE / "README.md"
REQUIREMENTS_PATH = HERE / "requirements.txt"
DEV_REQUIREMENTS_PATH = HERE / "requirements-dev.txt"

PACKAGE_NAME = "hallway-nav-sim"
DESCRIPTION = (
    "Variable-latency decision loop and Gymnasium environment for a "
    "cue-association hallway navigation task"
)
LICENSE = "MIT"

KEYWORDS = [
    "reinforcement learning",
    "gymnasium",
    "imitation learning",
    "demonstrations",
    "navigation",
    "simulation",
]

CLASSIFIERS = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "License :: OSI Approved :: MIT License",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: Gymnasium",
]


def read_requirements(requirements_file: pathlib.Path) -> list:
    """Return requirement strings from a requirements file, skipping comments."""
    if not requirements_file.exists():
        return []

    requirements = []
    for line in requirements_file.read_text(encoding="utf-8").splitlines():
        line = line.split("#")[0].strip()
        if line:
            requirements.append(line)
    return requirements


def read_long_description() -> str:
    if README_PATH.exists():
        return README_PATH.read_text(encoding="utf-8")
    return DESCRIPTION


def get_version_from_constants() -> str:
    """Read the package version from constants.yaml without importing anything."""
    for line in CONSTANTS_PATH.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped.startswith("version:"):
            return stripped.split(":", 1)[1].strip().strip("'\"")
    raise RuntimeError(f"No version entry found in {CONSTANTS_PATH}")


def setup_package():
    test_requirements = read_requirements(DEV_REQUIREMENTS_PATH)

    setuptools.setup(
        name=PACKAGE_NAME,
        version=get_version_from_constants(),
        description=DESCRIPTION,
        long_description=read_long_description(),
        long_description_content_type="text/markdown",
        license=LICENSE,
        keywords=KEYWORDS,
        classifiers=CLASSIFIERS,
        packages=setuptools.find_packages(include=["hallway_nav_sim", "hallway_nav_sim.*"]),
        install_requires=read_requirements(REQUIREMENTS_PATH),
        extras_require={
            "dev": test_requirements,
            "test": test_requirements,
        },
        package_data={"hallway_nav_sim": ["config/*.yaml"]},
        python_requires=">=3.10",
        zip_safe=False,
        include_package_data=True,
    )


if __name__ == "__main__":
    setup_package()
