"""Resolution of the host platform, used to select native archives of libraries and to
find the default game directory.
"""

from enum import Enum
from pathlib import Path
import platform

from .metadata import Download, LibraryEntry

from typing import Optional


class Platform(Enum):
    """The platforms supported by the game, the value is the name used by Mojang.
    """

    LINUX = "linux"
    WINDOWS = "windows"
    OSX = "osx"

    @property
    def natives_key(self) -> str:
        """The key of this platform's native archive in library classifiers.
        """
        return f"natives-{self.value}"


def host_identifier() -> str:
    """Return the identifier string of the running host. The `Darwin` system name of
    macOS is given as `macos`.
    """
    system = platform.system()
    return {"Darwin": "macos"}.get(system, system)


def detect_host_platform(host_id: Optional[str] = None) -> Platform:
    """Detect the platform from a host identifier, matched case-insensitively in this
    order: "win" for Windows, "mac" for OSX, "nix", "nux" or "uni" for Linux.

    :param host_id: The host identifier, defaults to `host_identifier()`.
    :raises UnsupportedPlatformError: If the identifier matches no platform.
    """

    if host_id is None:
        host_id = host_identifier()

    name = host_id.lower()
    if "win" in name:
        return Platform.WINDOWS
    elif "mac" in name:
        return Platform.OSX
    elif "nix" in name or "nux" in name or "uni" in name:
        return Platform.LINUX
    else:
        raise UnsupportedPlatformError(host_id)


def select_natives(entry: LibraryEntry, platform: Platform) -> Optional[Download]:
    """Return the native archive of the library for the given platform, if any.
    """

    natives = entry.natives
    if natives is None:
        return None
    elif platform is Platform.LINUX:
        return natives.linux
    elif platform is Platform.WINDOWS:
        return natives.windows
    elif platform is Platform.OSX:
        return natives.osx
    else:
        raise ValueError(f"unknown platform: {platform}")


def resolve_home_directory(platform: Platform, home: Optional[Path] = None) -> Path:
    """Return the game's directory for the given platform, `<home>/.minecraft` on Linux
    and Windows, `<home>/Library/Application Support/minecraft` on OSX.

    :param platform: The platform to get the directory for.
    :param home: The user's home directory, discovered if not given.
    :raises HomeDirectoryUnsetError: If the home directory can't be discovered.
    """

    if home is None:
        try:
            home = Path.home()
        except (RuntimeError, KeyError):
            raise HomeDirectoryUnsetError()
        # Older Pythons return the unexpanded path when home is unknown.
        if str(home) == "~":
            raise HomeDirectoryUnsetError()

    if platform is Platform.OSX:
        return home.joinpath("Library", "Application Support", "minecraft")
    else:
        return home / ".minecraft"


class UnsupportedPlatformError(Exception):
    """Raised when the host identifier matches no supported platform, the identifier is
    given.
    """

    def __init__(self, host_id: str) -> None:
        self.host_id = host_id

    def __str__(self) -> str:
        return repr(self.host_id)

class HomeDirectoryUnsetError(Exception):
    """Raised when the user's home directory can't be discovered.
    """
