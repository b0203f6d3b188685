"""CLI languages management.
"""

from typing import Optional


def get_raw(key: str, kwargs: Optional[dict]) -> str:
    """Get a message translated using the given keyword formatting arguments.

    :param key: The key of the message to translate.
    :param kwargs: The keyword formatting dictionary.
    :return: Translated message, or the key itself if not found.
    """
    try:
        return lang[key].format_map(kwargs or {})
    except KeyError:
        return key


def get(key: str, **kwargs) -> str:
    """Get a message translated using the given keyword formatting arguments.

    :param key: The key of the message to translate.
    :return: Translated message, or the key itself if not found.
    """
    return get_raw(key, kwargs)


lang = {
    # Args root
    "args": "Scaffold a Gradle project running a version of Minecraft already installed "
        "in the game's directory, its assets, libraries and natives are copied into "
        "the project.",
    "args.main_dir": "Set the main directory of the game's installation, defaults to "
        "the usual .minecraft directory of your system.",
    "args.output": "Set the output format, defaults to human-color.",
    "args.verbose": "Enable verbose output, list every library operation.",
    # Args search
    "args.search": "Search for installed versions.",
    # Args build
    "args.build": "Build a Gradle project for an installed version.",
    "args.build.no_init": "Don't run 'gradle init' before writing the build script.",
    "args.build.gradle": "Set the Gradle executable to use for initializing the project.",
    "args.build.main_class": "Set the main class started by the runClient task.",
    "args.build.version": "Installed version identifier, prompted if missing.",
    "args.build.directory": "Directory of the project, prompted if missing.",
    # Args show
    "args.show": "Show and debug various data.",
    "args.show.about": "Display authors, version and license.",
    # Common
    "cancelled": "Cancelled.",
    # Errors
    "error.os": "An unknown OS error was raised: {error}",
    "error.version_not_found": "Version {version} not found in {dir}.",
    "error.malformed_descriptor": "Invalid version descriptor, {error}.",
    "error.malformed_asset_index": "Invalid assets index, {error}.",
    "error.unsupported_platform": "Unsupported platform {host_id}.",
    "error.home_directory_unset": "Your home directory can't be found, use --main-dir.",
    "error.materialize": "Failed to {operation} {path}: {error}",
    "error.gradle_init": "Failed to run '{command}' (exit code: {code}).",
    "error.gradle_init.not_found": "Failed to start '{command}', is Gradle installed?",
    # Search
    "search.name": "Name",
    "search.last_modified": "Last modified",
    # Build
    "build.prompt.version": "Enter a Minecraft version< ",
    "build.prompt.directory": "Enter a directory< ",
    "build.descriptor.loaded": "Loaded version {version} (Java {java_major}, "
        "{libraries_count} libraries).",
    "build.platform": "Platform: {platform}",
    "build.gradle.running": "Initializing Gradle project...",
    "build.gradle.done": "Initialized Gradle project.",
    "build.project.init": "Created build.gradle in {dir}",
    "build.assets.copying": "Copying assets {index_id}... {count}/{total}",
    "build.assets.copied": "Copied {count} assets objects ({index_id}).",
    "build.libraries.planned": "Resolved {libraries_count} libraries: "
        "{copy_count} to copy, {extract_count} to extract.",
    "build.libraries.copy": "Copied {name}",
    "build.libraries.extract": "Extracted {name}",
    "build.libraries.copied": "Copied {copy_count} libraries and extracted "
        "{extract_count} natives archives.",
    "build.jar.copied": "Copied version JAR {name}",
    "build.done": "Project ready in {dir}, run it with 'gradle runClient'.",
}
