"""Definition of the project builder, scaffolding a Gradle project from a version of
the game already installed in the game's directory.

The build is a fixed sequence of steps: loading the version descriptor, resolving the
platform, initializing the project, then copying assets and libraries. The first
error aborts the build and nothing is rolled back.
"""

from pathlib import Path

from .metadata import VersionDescriptor, AssetIndex, load_version_descriptor, load_asset_index
from .host import Platform, detect_host_platform, resolve_home_directory
from .plan import Operation, CopyFileOp, ExtractArchiveOp, MaterializeError, \
    build_asset_copy_plan, build_library_copy_plan, execute_plan
from .gradle import GITIGNORE_CONTENT, DEFAULT_MAIN_CLASS, generate_build_script, init_gradle_project

from typing import Optional, Iterator, Dict, Callable, Any


class Context:
    """Context of the game's installation from where files are copied. This defines the
    directories where versions, assets and libraries are stored.
    """

    def __init__(self, main_dir: Optional[Path] = None) -> None:
        """Construct the context of a game's installation.

        :param main_dir: The main directory of the game's installation, if not
        specified this is the usual `.minecraft` directory of the running platform.
        """

        main_dir = resolve_home_directory(detect_host_platform()) if main_dir is None else main_dir
        self.main_dir = main_dir
        self.versions_dir = main_dir / "versions"
        self.assets_dir = main_dir / "assets"
        self.libraries_dir = main_dir / "libraries"

    def get_version(self, version: str) -> "VersionHandle":
        """Get a version's handle.
        """
        return VersionHandle(version, self.versions_dir / version)

    def list_versions(self) -> "Iterator[VersionHandle]":
        """List installed versions given their handles.
        """
        if self.versions_dir.is_dir():
            for version_dir in sorted(self.versions_dir.iterdir()):
                if version_dir.is_dir():
                    version = VersionHandle(version_dir.name, version_dir)
                    if version.metadata_exists():
                        yield version


class VersionHandle:
    """Handle of an installed version, giving the paths of its files.
    """

    __slots__ = "id", "dir"

    def __init__(self, id: str, dir: Path) -> None:
        self.id = id
        self.dir = dir

    def metadata_exists(self) -> bool:
        return self.metadata_file().is_file()

    def metadata_file(self) -> Path:
        return self.dir / f"{self.id}.json"

    def jar_file(self) -> Path:
        return self.dir / f"{self.id}.jar"

    def __repr__(self) -> str:
        return f"<VersionHandle {self.id}>"


class Project:
    """Layout of the produced project directory.
    """

    def __init__(self, dir: Path) -> None:
        self.dir = dir
        self.runs_dir = dir / "runs"
        self.assets_dir = self.runs_dir / "assets"
        self.indexes_dir = self.assets_dir / "indexes"
        self.objects_dir = self.assets_dir / "objects"
        self.libraries_dir = self.runs_dir / "libraries"
        self.build_file = dir / "build.gradle"
        self.gitignore_file = dir / ".gitignore"


class Watcher:
    """Base class for a watcher of the build process.
    """

    def handle(self, event: Any) -> None:
        """Called when the watcher can handle the given event. Default implementation
        does nothing.
        """


class SimpleWatcher(Watcher):
    """A watcher dispatching events to the handler registered for their exact type.
    """

    def __init__(self, handlers: Dict[type, Callable[[Any], None]]) -> None:
        self.handlers = handlers

    def handle(self, event: Any) -> None:
        handler = self.handlers.get(type(event))
        if handler is not None:
            handler(event)


class Builder:
    """Builder of a Gradle project for an installed version of the game.
    """

    def __init__(self, version: str, project_dir: Path, *,
        context: Optional[Context] = None,
        platform: Optional[Platform] = None
    ) -> None:
        """Construct a builder.

        :param version: Identifier of the installed version to build the project for.
        :param project_dir: Directory of the project, created if needed.
        :param context: The game's installation context, defaults to the platform's
        game directory.
        :param platform: The platform to select native archives for, detected from the
        running host if not given.
        """

        self.version = version
        self.project = Project(project_dir)
        self.context = Context() if context is None else context
        self.platform = platform

        self.gradle_init = True
        self.gradle_bin = "gradle"
        self.main_class = DEFAULT_MAIN_CLASS

        # Internal state, computed by the build steps.
        self._handle: Optional[VersionHandle] = None
        self._descriptor: Optional[VersionDescriptor] = None
        self._asset_index: Optional[AssetIndex] = None

    def build(self, *, watcher: Optional[Watcher] = None) -> None:
        """Run all steps of the build.

        :raises VersionNotFoundError: If the version has no metadata file.
        :raises MalformedDescriptorError: If the version descriptor is invalid.
        :raises MalformedAssetIndexError: If the assets index is invalid.
        :raises UnsupportedPlatformError: If no platform was given and the running
        one can't be detected.
        :raises GradleInitError: If the Gradle initialization fails.
        :raises MaterializeError: If a file can't be read, written, copied or extracted.
        """

        if watcher is None:
            watcher = Watcher()

        self._load_descriptor(watcher)
        self._resolve_platform(watcher)
        self._init_project(watcher)
        self._copy_assets(watcher)
        self._copy_libraries(watcher)
        self._copy_jar(watcher)

    def _load_descriptor(self, watcher: Watcher) -> None:

        handle = self.context.get_version(self.version)
        if not handle.metadata_exists():
            raise VersionNotFoundError(self.version)

        try:
            descriptor = load_version_descriptor(handle.metadata_file())
        except OSError as e:
            raise MaterializeError("read", handle.metadata_file()) from e

        self._handle = handle
        self._descriptor = descriptor
        watcher.handle(DescriptorLoadedEvent(self.version, descriptor.asset_index_id,
            descriptor.java_major, len(descriptor.libraries)))

    def _resolve_platform(self, watcher: Watcher) -> None:
        if self.platform is None:
            self.platform = detect_host_platform()
        watcher.handle(PlatformResolvedEvent(self.platform))

    def _init_project(self, watcher: Watcher) -> None:

        assert self._descriptor is not None
        project = self.project

        try:
            project.dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MaterializeError("mkdir", project.dir) from e

        if self.gradle_init:
            watcher.handle(GradleInitEvent(False))
            init_gradle_project(project.dir, self.gradle_bin)
            watcher.handle(GradleInitEvent(True))

        script = generate_build_script(self._descriptor.java_major, main_class=self.main_class)

        try:
            project.build_file.write_text(script)
            project.gitignore_file.write_text(GITIGNORE_CONTENT)
        except OSError as e:
            raise MaterializeError("write", project.dir) from e

        for dir in (project.indexes_dir, project.objects_dir, project.libraries_dir):
            try:
                dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise MaterializeError("mkdir", dir) from e

        watcher.handle(ProjectInitEvent(project.dir))

    def _copy_assets(self, watcher: Watcher) -> None:

        assert self._descriptor is not None

        index_id = self._descriptor.asset_index_id
        index_file = self.context.assets_dir.joinpath("indexes", f"{index_id}.json")

        # The index file is copied as-is before being parsed.
        CopyFileOp(index_file, self.project.indexes_dir / f"{index_id}.json").execute()

        try:
            self._asset_index = load_asset_index(index_file)
        except OSError as e:
            raise MaterializeError("read", index_file) from e

        ops = build_asset_copy_plan(self._asset_index, self.context.assets_dir / "objects", self.project.objects_dir)
        total = len(ops)
        watcher.handle(AssetsCopyEvent(index_id, 0, total))

        count = 0
        def progress(op: Operation) -> None:
            nonlocal count
            count += 1
            watcher.handle(AssetsCopyEvent(index_id, count, total))

        execute_plan(ops, progress)
        watcher.handle(AssetsCopiedEvent(index_id, total))

    def _copy_libraries(self, watcher: Watcher) -> None:

        assert self._descriptor is not None
        assert self.platform is not None

        libraries = self._descriptor.libraries
        ops = build_library_copy_plan(libraries, self.platform, self.context.libraries_dir, self.project.libraries_dir)

        copied = sum(1 for op in ops if isinstance(op, CopyFileOp))
        extracted = sum(1 for op in ops if isinstance(op, ExtractArchiveOp))
        watcher.handle(LibrariesPlannedEvent(len(libraries), copied, extracted))

        execute_plan(ops, lambda op: watcher.handle(LibraryOpEvent(op)))
        watcher.handle(LibrariesCopiedEvent(copied, extracted))

    def _copy_jar(self, watcher: Watcher) -> None:

        assert self._handle is not None

        jar_file = self._handle.jar_file()
        dst_file = self.project.libraries_dir / jar_file.name
        CopyFileOp(jar_file, dst_file).execute()
        watcher.handle(JarCopiedEvent(dst_file))


class VersionNotFoundError(Exception):
    """Raised when a version has no metadata file in the game's installation. The version
    that was not found is given.
    """
    def __init__(self, version: str) -> None:
        self.version = version

    def __str__(self) -> str:
        return repr(self.version)


class DescriptorLoadedEvent:
    """Event triggered when the version descriptor has been parsed.
    """
    __slots__ = "version", "asset_index_id", "java_major", "libraries_count"
    def __init__(self, version: str, asset_index_id: str, java_major: int, libraries_count: int) -> None:
        self.version = version
        self.asset_index_id = asset_index_id
        self.java_major = java_major
        self.libraries_count = libraries_count

class PlatformResolvedEvent:
    __slots__ = "platform",
    def __init__(self, platform: Platform) -> None:
        self.platform = platform

class GradleInitEvent:
    """Event triggered before and after running the Gradle initialization.
    """
    __slots__ = "done",
    def __init__(self, done: bool) -> None:
        self.done = done

class ProjectInitEvent:
    """Event triggered when the project's files and directories have been created.
    """
    __slots__ = "dir",
    def __init__(self, dir: Path) -> None:
        self.dir = dir

class AssetsCopyEvent:
    """Event triggered when assets start being copied (count is 0) and after each
    copied asset object.
    """
    __slots__ = "index_id", "count", "total"
    def __init__(self, index_id: str, count: int, total: int) -> None:
        self.index_id = index_id
        self.count = count
        self.total = total

class AssetsCopiedEvent:
    __slots__ = "index_id", "count"
    def __init__(self, index_id: str, count: int) -> None:
        self.index_id = index_id
        self.count = count

class LibrariesPlannedEvent:
    """Event triggered when the libraries operations are known. Libraries whose files
    are missing in the game's installation have no operation.
    """
    __slots__ = "libraries_count", "copy_count", "extract_count"
    def __init__(self, libraries_count: int, copy_count: int, extract_count: int) -> None:
        self.libraries_count = libraries_count
        self.copy_count = copy_count
        self.extract_count = extract_count

class LibraryOpEvent:
    """Event triggered after each library operation.
    """
    __slots__ = "op",
    def __init__(self, op: Operation) -> None:
        self.op = op

class LibrariesCopiedEvent:
    __slots__ = "copy_count", "extract_count"
    def __init__(self, copy_count: int, extract_count: int) -> None:
        self.copy_count = copy_count
        self.extract_count = extract_count

class JarCopiedEvent:
    """Event triggered when the version's JAR file has been copied with the libraries.
    """
    __slots__ = "path",
    def __init__(self, path: Path) -> None:
        self.path = path
