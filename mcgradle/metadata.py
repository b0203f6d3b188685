"""Typed model of the version descriptor (the `<version>.json` metadata file of the
game) and of the assets index, with the functions parsing them from decoded JSON.

Parsing is done in one pass and is strict: any missing or mistyped field aborts the
whole parse with an error giving the path of the problematic value, no partial model
is ever returned.
"""

from json import JSONDecodeError
from pathlib import Path
import json

from .util import is_safe_relative_path, is_safe_file_name, is_hex, file_name_from_path

from typing import Optional, Dict, Tuple, Any


class Download:
    """A file to download, only its path relative to the libraries directory is kept.
    """

    __slots__ = "path",

    def __init__(self, path: str) -> None:
        self.path = path

    def file_name(self) -> str:
        """Return the file name component of this download's path.
        """
        return file_name_from_path(self.path)

    def __repr__(self) -> str:
        return f"<Download {self.path}>"


class PlatformNatives:
    """Native archives of a library, for each supported platform.
    """

    __slots__ = "linux", "windows", "osx"

    def __init__(self,
        linux: Optional[Download] = None,
        windows: Optional[Download] = None,
        osx: Optional[Download] = None
    ) -> None:
        self.linux = linux
        self.windows = windows
        self.osx = osx


class LibraryEntry:
    """A library of the version descriptor. When natives are present, the artifact is
    always absent even if the descriptor declares one.
    """

    __slots__ = "name", "artifact", "natives"

    def __init__(self,
        name: Optional[str],
        artifact: Optional[Download],
        natives: Optional[PlatformNatives]
    ) -> None:
        self.name = name
        self.artifact = artifact
        self.natives = natives

    def __repr__(self) -> str:
        return f"<LibraryEntry {self.name}>"


class VersionDescriptor:
    """The parsed version descriptor, only the fields needed to scaffold the project are
    kept: the assets index id, the required Java major version and the libraries.
    """

    __slots__ = "asset_index_id", "java_major", "libraries"

    def __init__(self, asset_index_id: str, java_major: int, libraries: Tuple[LibraryEntry, ...]) -> None:
        self.asset_index_id = asset_index_id
        self.java_major = java_major
        self.libraries = libraries


class AssetObject:
    """An asset object, identified by the hash of its content.
    """

    __slots__ = "hash",

    def __init__(self, hash: str) -> None:
        self.hash = hash

    @property
    def bucket(self) -> str:
        """The name of the directory where this object is stored, this is the first two
        characters of its hash.
        """
        return self.hash[:2]


class AssetIndex:
    """The parsed assets index, mapping each logical asset name to its object.
    """

    __slots__ = "objects",

    def __init__(self, objects: Dict[str, AssetObject]) -> None:
        self.objects = objects


def parse_version_descriptor(raw: Any) -> VersionDescriptor:
    """Parse a decoded version descriptor document.

    :param raw: The JSON document, as returned by `json.load`.
    :raises MalformedDescriptorError: If any required field is missing or mistyped.
    :raises MalformedLibraryEntryError: If a library has neither an artifact nor
    classifiers in its downloads.
    :raises MissingDownloadPathError: If a download object has no path.
    """

    if not isinstance(raw, dict):
        raise MalformedDescriptorError("/", "an object")

    asset_index = _get_object(raw, "assetIndex", "")
    asset_index_id = asset_index.get("id")
    if not isinstance(asset_index_id, str) or not len(asset_index_id):
        raise MalformedDescriptorError("/assetIndex/id", "a non-empty string")
    if not is_safe_file_name(asset_index_id):
        raise MalformedDescriptorError("/assetIndex/id", "a file name without separator")

    java_version = _get_object(raw, "javaVersion", "")
    java_major = java_version.get("majorVersion")
    if not _is_int(java_major) or java_major <= 0:
        raise MalformedDescriptorError("/javaVersion/majorVersion", "a positive integer")

    raw_libraries = raw.get("libraries")
    if not isinstance(raw_libraries, list):
        raise MalformedDescriptorError("/libraries", "a list")

    libraries = tuple(parse_library(library, f"/libraries/{library_idx}")
        for library_idx, library in enumerate(raw_libraries))

    return VersionDescriptor(asset_index_id, java_major, libraries)


def parse_library(raw: Any, path: str) -> LibraryEntry:
    """Parse a single library object of the version descriptor. When the downloads
    object has classifiers, the artifact is ignored.
    """

    if not isinstance(raw, dict):
        raise MalformedDescriptorError(path, "an object")

    name = raw.get("name")
    if name is not None and not isinstance(name, str):
        raise MalformedDescriptorError(f"{path}/name", "a string")

    downloads = _get_object(raw, "downloads", path)

    if "classifiers" in downloads:
        classifiers = _get_object(downloads, "classifiers", f"{path}/downloads")
        natives = PlatformNatives(**{
            attr: parse_download(classifiers[key], f"{path}/downloads/classifiers/{key}")
            for attr, key in (("linux", "natives-linux"), ("windows", "natives-windows"), ("osx", "natives-osx"))
            if key in classifiers
        })
        return LibraryEntry(name, None, natives)
    elif "artifact" in downloads:
        artifact = parse_download(downloads["artifact"], f"{path}/downloads/artifact")
        return LibraryEntry(name, artifact, None)
    else:
        raise MalformedLibraryEntryError(f"{path}/downloads")


def parse_download(raw: Any, path: str) -> Download:
    """Common function to parse a download object, only its path is read and it must be
    a safe relative path.
    """

    if not isinstance(raw, dict):
        raise MalformedDescriptorError(path, "an object")

    dl_path = raw.get("path")
    if dl_path is None:
        raise MissingDownloadPathError(f"{path}/path")
    if not isinstance(dl_path, str):
        raise MalformedDescriptorError(f"{path}/path", "a string")
    if not is_safe_relative_path(dl_path):
        raise MalformedDescriptorError(f"{path}/path", "a relative path without parent segment")

    return Download(dl_path)


def parse_asset_index(raw: Any) -> AssetIndex:
    """Parse a decoded assets index document.

    :param raw: The JSON document, as returned by `json.load`.
    :raises MalformedAssetIndexError: If the objects mapping is missing or if any
    object has no valid hash.
    """

    if not isinstance(raw, dict):
        raise MalformedAssetIndexError("/", "an object")

    raw_objects = raw.get("objects")
    if not isinstance(raw_objects, dict):
        raise MalformedAssetIndexError("/objects", "an object")

    objects = {}
    for asset_id, asset_obj in raw_objects.items():

        if not isinstance(asset_obj, dict):
            raise MalformedAssetIndexError(f"/objects/{asset_id}", "an object")

        asset_hash = asset_obj.get("hash")
        if not isinstance(asset_hash, str) or len(asset_hash) < 2 or len(asset_hash) % 2 != 0 or not is_hex(asset_hash):
            raise MalformedAssetIndexError(f"/objects/{asset_id}/hash", "a lowercase hexadecimal string of even length")

        objects[asset_id] = AssetObject(asset_hash)

    return AssetIndex(objects)


def load_version_descriptor(file: Path) -> VersionDescriptor:
    """Read and parse a version descriptor file. OS errors are not caught.
    """
    with file.open("rb") as fp:
        try:
            raw = json.load(fp)
        except (JSONDecodeError, UnicodeDecodeError):
            raise MalformedDescriptorError("/", "valid JSON")
    return parse_version_descriptor(raw)


def load_asset_index(file: Path) -> AssetIndex:
    """Read and parse an assets index file. OS errors are not caught.
    """
    with file.open("rb") as fp:
        try:
            raw = json.load(fp)
        except (JSONDecodeError, UnicodeDecodeError):
            raise MalformedAssetIndexError("/", "valid JSON")
    return parse_asset_index(raw)


def _get_object(parent: dict, key: str, path: str) -> dict:
    value = parent.get(key)
    if not isinstance(value, dict):
        raise MalformedDescriptorError(f"{path}/{key}", "an object")
    return value


def _is_int(value: Any) -> bool:
    # Booleans are integers for Python, but not for JSON.
    return isinstance(value, int) and not isinstance(value, bool)


class MalformedDescriptorError(ValueError):
    """Raised when the version descriptor doesn't follow the expected schema. The path
    of the problematic value is given, and a short description of what was expected.
    """

    def __init__(self, path: str, expected: str) -> None:
        self.path = path
        self.expected = expected

    def __str__(self) -> str:
        return f"metadata: {self.path} must be {self.expected}"

class MalformedLibraryEntryError(MalformedDescriptorError):
    """Raised when a library's downloads object has neither an artifact nor classifiers,
    the path of the downloads object is given.
    """

    def __init__(self, path: str) -> None:
        super().__init__(path, "an object with 'artifact' or 'classifiers'")

class MissingDownloadPathError(MalformedDescriptorError):
    """Raised when a download object has no path.
    """

    def __init__(self, path: str) -> None:
        super().__init__(path, "present")

class MalformedAssetIndexError(ValueError):
    """Raised when the assets index doesn't follow the expected schema.
    """

    def __init__(self, path: str, expected: str) -> None:
        self.path = path
        self.expected = expected

    def __str__(self) -> str:
        return f"assets index: {self.path} must be {self.expected}"
