"""Global utilities used internally. The functions can be used externally but upward
compatibility is not guaranteed unless explicitly specified.
"""

from pathlib import PurePosixPath, PureWindowsPath


LOWER_HEX_DIGITS = frozenset("0123456789abcdef")


def file_name_from_path(path: str) -> str:
    """Return the file name component of a forward-slash separated relative path, as
    found in metadata files.

    Path `com/foo/foo-1.0.jar` gives `foo-1.0.jar`.
    """
    return PurePosixPath(path).name


def is_safe_relative_path(path: str) -> bool:
    """Return true if the given path is not empty, relative on every platform and does
    not contain any parent directory segment. Such a path can be safely joined to a
    root directory without escaping it.
    """
    if not len(path):
        return False
    if PurePosixPath(path).is_absolute() or PureWindowsPath(path).anchor:
        return False
    return ".." not in PurePosixPath(path.replace("\\", "/")).parts


def is_safe_file_name(name: str) -> bool:
    """Return true if the given name can be used as a single file name in a directory,
    it must not contain any separator, drive or parent segment.
    """
    if not len(name) or "/" in name or "\\" in name or ".." in name:
        return False
    return not PureWindowsPath(name).drive and name != "."


def is_hex(s: str) -> bool:
    """Return true if the given string is not empty and only made of lowercase
    hexadecimal digits.
    """
    return len(s) != 0 and all(c in LOWER_HEX_DIGITS for c in s)
