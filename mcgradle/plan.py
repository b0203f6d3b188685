"""Derivation of the file operations needed to materialize assets and libraries from
the game's installation into the project, and their execution.

Building a plan only checks for files existence, missing optional files are skipped.
Executing a plan stops on the first error, files already written are left as-is.
"""

from zipfile import ZipFile, BadZipFile
from pathlib import Path, PurePosixPath
import shutil

from .metadata import AssetIndex, LibraryEntry
from .host import Platform, select_natives

from typing import Iterable, List, Optional, Callable


class Operation:
    """Base class for a file operation of a plan.
    """

    def execute(self) -> None:
        """Execute the operation.

        :raises MaterializeError: If the operation fails for any I/O reason.
        """
        raise NotImplementedError


class CopyOp(Operation):
    """Copy of an asset object, the bucket directory is created before copying.
    """

    __slots__ = "src", "dst", "ensure_dir"

    def __init__(self, src: Path, dst: Path, ensure_dir: Path) -> None:
        self.src = src
        self.dst = dst
        self.ensure_dir = ensure_dir

    def execute(self) -> None:
        try:
            self.ensure_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(str(self.src), str(self.dst))
        except OSError as e:
            raise MaterializeError("copy", _failed_path(e, self.src)) from e

    def __repr__(self) -> str:
        return f"<CopyOp {self.src} -> {self.dst}>"


class CopyFileOp(Operation):
    """Copy of a single file, the destination's parent directory is created.
    """

    __slots__ = "src", "dst"

    def __init__(self, src: Path, dst: Path) -> None:
        self.src = src
        self.dst = dst

    def execute(self) -> None:
        try:
            self.dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(str(self.src), str(self.dst))
        except OSError as e:
            raise MaterializeError("copy", _failed_path(e, self.src)) from e

    def __repr__(self) -> str:
        return f"<CopyFileOp {self.src} -> {self.dst}>"


class ExtractArchiveOp(Operation):
    """Extraction of all the content of a zip archive (usually a native JAR) into a
    destination directory.
    """

    __slots__ = "archive", "dst_dir"

    def __init__(self, archive: Path, dst_dir: Path) -> None:
        self.archive = archive
        self.dst_dir = dst_dir

    def execute(self) -> None:
        try:
            self.dst_dir.mkdir(parents=True, exist_ok=True)
            with ZipFile(self.archive, "r") as archive_zip:
                for member in archive_zip.namelist():
                    member_path = PurePosixPath(member.replace("\\", "/"))
                    if member_path.is_absolute() or ".." in member_path.parts:
                        raise MaterializeError("extract", self.archive, f"unsafe member {member}")
                archive_zip.extractall(self.dst_dir)
        except OSError as e:
            raise MaterializeError("extract", _failed_path(e, self.archive)) from e
        except BadZipFile as e:
            raise MaterializeError("extract", self.archive) from e

    def __repr__(self) -> str:
        return f"<ExtractArchiveOp {self.archive} -> {self.dst_dir}>"


def build_asset_copy_plan(index: AssetIndex, src_objects_dir: Path, dst_objects_dir: Path) -> List[CopyOp]:
    """Build the list of copy operations of all asset objects of the index, objects are
    stored in a bucket directory named after the first two characters of their hash,
    this layout is kept in the destination directory.
    """

    ops = []
    for asset_obj in index.objects.values():
        bucket_dir = dst_objects_dir / asset_obj.bucket
        ops.append(CopyOp(
            src_objects_dir.joinpath(asset_obj.bucket, asset_obj.hash),
            bucket_dir / asset_obj.hash,
            bucket_dir))
    return ops


def build_library_copy_plan(
    libraries: Iterable[LibraryEntry],
    platform: Platform,
    src_libraries_dir: Path,
    dst_libraries_dir: Path
) -> List[Operation]:
    """Build the list of operations materializing libraries in the flat destination
    libraries directory. Artifacts are copied under their file name only, native
    archives of the given platform are extracted. Libraries whose file is not present
    in the source directory are skipped.
    """

    ops = []
    for library in libraries:

        if library.artifact is not None:
            artifact_file = src_libraries_dir / library.artifact.path
            if artifact_file.is_file():
                ops.append(CopyFileOp(artifact_file, dst_libraries_dir / library.artifact.file_name()))

        natives = select_natives(library, platform)
        if natives is not None:
            natives_file = src_libraries_dir / natives.path
            if natives_file.is_file():
                ops.append(ExtractArchiveOp(natives_file, dst_libraries_dir))

    return ops


def execute_plan(ops: Iterable[Operation], callback: Optional[Callable[[Operation], None]] = None) -> int:
    """Sequentially execute all operations of a plan, the callback is called after
    each executed operation.

    :return: The number of executed operations.
    :raises MaterializeError: On the first failing operation.
    """

    count = 0
    for op in ops:
        op.execute()
        count += 1
        if callback is not None:
            callback(op)
    return count


def _failed_path(error: OSError, default: Path) -> Path:
    """Return the path an OS error was raised for, the given default if unknown.
    """
    return default if error.filename is None else Path(error.filename)


class MaterializeError(Exception):
    """Raised when an operation fails to copy or extract a file, the operation name and
    the path that failed (source or destination) are given. The original error, if
    any, is the cause.
    """

    def __init__(self, operation: str, path: Path, reason: Optional[str] = None) -> None:
        self.operation = operation
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        reason = self.__cause__ if self.reason is None else self.reason
        if reason is None:
            return f"{self.operation} {self.path}"
        return f"{self.operation} {self.path}: {reason}"
