"""Setup script for the icalagenda application."""

import os
from pathlib import Path

from setuptools import find_packages, setup
from setuptools.command.develop import develop
from setuptools.command.install import install


def post_install_setup():
    """Create the configuration directory and point at the example config."""
    config_dir = Path.home() / ".config" / "icalagenda"
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
        if hasattr(os, "chmod"):
            os.chmod(config_dir, 0o755)
    except OSError as e:
        print(f"Warning: could not create {config_dir}: {e}")
        return

    if not (config_dir / "config.yaml").exists():
        print("\n" + "=" * 60)
        print("icalagenda installation complete")
        print("=" * 60)
        print(f"Configuration directory: {config_dir}")
        print("\nNext steps:")
        print("1. Copy config/config.yaml.example to the configuration directory as config.yaml")
        print("2. Or run 'icalagenda --calendar PATH' with a calendar file or directory")
        print("3. Run 'icalagenda --help' to see all available options")
        print("=" * 60)


class PostInstallCommand(install):
    """Custom install command with post-install setup."""

    def run(self):
        install.run(self)
        post_install_setup()


class PostDevelopCommand(develop):
    """Custom develop command with post-install setup."""

    def run(self):
        develop.run(self)
        post_install_setup()


# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements, routing test tooling into the dev extra
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
dev_requirements = []

if requirements_file.exists():
    for line in requirements_file.read_text().strip().split("\n"):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "pytest" in line:
            dev_requirements.append(line)
        else:
            requirements.append(line)

setup(
    name="icalagenda",
    version="1.0.0",
    description="Agenda and task list from local iCalendar files",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests*", "docs*"]),
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        "test": dev_requirements,
        "dev": dev_requirements
        + [
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Topic :: Office/Business :: Scheduling",
    ],
    keywords="calendar ics icalendar rrule agenda tasks todo",
    entry_points={
        "console_scripts": [
            "icalagenda=icalagenda.__main__:main",
        ],
    },
    data_files=[
        ("share/icalagenda/config", ["config/config.yaml.example"]),
    ],
    cmdclass={
        "install": PostInstallCommand,
        "develop": PostDevelopCommand,
    },
    zip_safe=False,
)
