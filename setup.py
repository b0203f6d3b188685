from setuptools import setup

with open("README.md", "r", encoding="utf-8") as fp:
    long_description = fp.read()

setup(
    name="mc-gradle-builder",
    version="0.1.0",
    description="Scaffold a Gradle project running an installed Minecraft version, with "
                "its assets, libraries and natives copied from the game's directory.",
    packages=["mcgradle", "mcgradle.cli"],
    python_requires=">=3.7",
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["mcgradle = mcgradle.cli:main"],
    },
    long_description=long_description,
    long_description_content_type="text/markdown",
)
