"""Main entry point of the CLI.
"""

from pathlib import Path
import sys

from .parse import register_arguments, RootNs, SearchNs, BuildNs
from .output import Output, HumanOutput, MachineOutput
from .lang import get as _

from mcgradle.metadata import MalformedDescriptorError, MalformedAssetIndexError
from mcgradle.host import UnsupportedPlatformError, HomeDirectoryUnsetError
from mcgradle.plan import MaterializeError, CopyFileOp, ExtractArchiveOp
from mcgradle.gradle import GradleInitError
from mcgradle.builder import Context, Builder, SimpleWatcher, VersionNotFoundError, \
    DescriptorLoadedEvent, PlatformResolvedEvent, GradleInitEvent, ProjectInitEvent, \
    AssetsCopyEvent, AssetsCopiedEvent, LibrariesPlannedEvent, LibraryOpEvent, \
    LibrariesCopiedEvent, JarCopiedEvent

from typing import cast, Optional, List, Union, Dict, Callable, Any


EXIT_OK = 0
EXIT_FAILURE = 1

CommandHandler = Callable[[Any], Any]
CommandTree = Dict[str, Union[CommandHandler, "CommandTree"]]


def main(args: Optional[List[str]] = None):
    """Main entry point of the CLI. This function parses the input arguments and try to
    find a command handler to dispatch to. These command handlers are specified by the
    `get_command_handlers` function.
    """

    parser = register_arguments()
    ns: RootNs = cast(RootNs, parser.parse_args(sys.argv[1:] if args is None else args))

    ns.out = get_output(ns.out_kind)

    # Find the command handler and run it.
    command_handlers = get_command_handlers()
    command_attr = "subcommand"
    while True:
        command = getattr(ns, command_attr)
        handler = command_handlers.get(command)
        if handler is None:
            parser.print_help()
            sys.exit(EXIT_FAILURE)
        elif callable(handler):
            cmd(handler, ns)
        elif isinstance(handler, dict):
            command_attr = f"{command}_{command_attr}"
            command_handlers = handler
            continue
        sys.exit(EXIT_OK)


def get_output(kind: str) -> Output:
    """Internal function that construct the output depending on its kind.
    The kind is constrained by choices set to the arguments parser.
    """

    if kind == "human-color":
        return HumanOutput(True)
    elif kind == "human":
        return HumanOutput(False)
    elif kind == "machine":
        return MachineOutput()
    else:
        raise ValueError()


def get_command_handlers() -> CommandTree:
    """Internal function returns the tree of command handlers for each subcommand
    of the CLI argument parser.
    """

    return {
        "search": cmd_search,
        "build": cmd_build,
        "show": {
            "about": cmd_show_about,
        },
    }


def cmd(handler: CommandHandler, ns: RootNs):
    """Generic command handler that launch the given handler with the given namespace,
    it handles error in order to pretty print them.
    """

    try:
        handler(ns)
        sys.exit(EXIT_OK)

    except KeyboardInterrupt:
        ns.out.finish()
        ns.out.task("HALT", "cancelled")
        ns.out.finish()

    except VersionNotFoundError as error:
        fail(ns, "error.version_not_found", version=error.version, dir=ns.context.versions_dir)

    except MalformedDescriptorError as error:
        fail(ns, "error.malformed_descriptor", error=str(error))

    except MalformedAssetIndexError as error:
        fail(ns, "error.malformed_asset_index", error=str(error))

    except UnsupportedPlatformError as error:
        fail(ns, "error.unsupported_platform", host_id=error.host_id)

    except HomeDirectoryUnsetError:
        fail(ns, "error.home_directory_unset")

    except GradleInitError as error:
        command = " ".join(error.command)
        if error.code is None:
            fail(ns, "error.gradle_init.not_found", command=command)
        else:
            fail(ns, "error.gradle_init", command=command, code=error.code)
            if ns.verbose >= 1:
                print(error.output)

    except MaterializeError as error:
        fail(ns, "error.materialize", operation=error.operation, path=error.path,
            error=error.reason if error.reason is not None else error.__cause__)

    except OSError as error:
        fail(ns, "error.os", error=str(error))
        import traceback
        traceback.print_exc()

    sys.exit(EXIT_FAILURE)


def fail(ns: RootNs, key: str, **kwargs) -> None:
    ns.out.finish()
    ns.out.task("FAILED", key, **kwargs)
    ns.out.finish()


def new_context(ns: RootNs) -> Context:
    """Create the installation context from the namespace, the default directory of the
    game is only resolved when no main directory is given.
    """
    ns.context = Context(ns.main_dir)
    return ns.context


def cmd_search(ns: SearchNs):

    context = new_context(ns)

    table = ns.out.table()
    table.add(_("search.name"), _("search.last_modified"))
    table.separator()

    from datetime import datetime

    for version in context.list_versions():
        if ns.input is None or ns.input in version.id:
            mtime = version.metadata_file().stat().st_mtime
            table.add(version.id, datetime.fromtimestamp(mtime).strftime("%c"))

    table.print()


def cmd_build(ns: BuildNs):

    context = new_context(ns)

    version = ns.version
    if version is None:
        version = ns.out.prompt("build.prompt.version")

    raw_directory = ns.directory
    if raw_directory is None and version:
        raw_directory = ns.out.prompt("build.prompt.directory")

    # An empty version or directory cancels the build.
    if not version or not raw_directory:
        ns.out.task("HALT", "cancelled")
        ns.out.finish()
        sys.exit(EXIT_FAILURE)

    directory = Path(raw_directory)
    builder = Builder(version, directory, context=context)
    builder.gradle_init = not ns.no_init
    builder.gradle_bin = ns.gradle
    builder.main_class = ns.main_class
    builder.build(watcher=BuildWatcher(ns))

    ns.out.task("OK", "build.done", dir=directory)
    ns.out.finish()


def cmd_show_about(ns: RootNs):

    from .. import BUILDER_NAME, BUILDER_VERSION, BUILDER_AUTHORS

    print(f"Name: {BUILDER_NAME}")
    print(f"Version: {BUILDER_VERSION}")
    print(f"Authors: {', '.join(BUILDER_AUTHORS)}")


class BuildWatcher(SimpleWatcher):

    def __init__(self, ns: RootNs) -> None:

        def progress_task(key: str, **kwargs) -> None:
            ns.out.task("..", key, **kwargs)

        def finish_task(key: str, **kwargs) -> None:
            ns.out.task("OK", key, **kwargs)
            ns.out.finish()

        def platform_resolved(e: PlatformResolvedEvent) -> None:
            if ns.verbose >= 1:
                ns.out.task("INFO", "build.platform", platform=e.platform.value)
                ns.out.finish()

        def gradle_init(e: GradleInitEvent) -> None:
            if e.done:
                finish_task("build.gradle.done")
            else:
                progress_task("build.gradle.running")

        def library_op(e: LibraryOpEvent) -> None:
            if ns.verbose >= 1:
                if isinstance(e.op, CopyFileOp):
                    ns.out.task("INFO", "build.libraries.copy", name=e.op.dst.name)
                elif isinstance(e.op, ExtractArchiveOp):
                    ns.out.task("INFO", "build.libraries.extract", name=e.op.archive.name)
                ns.out.finish()

        super().__init__({
            DescriptorLoadedEvent: lambda e: finish_task("build.descriptor.loaded",
                version=e.version, java_major=e.java_major, libraries_count=e.libraries_count),
            PlatformResolvedEvent: platform_resolved,
            GradleInitEvent: gradle_init,
            ProjectInitEvent: lambda e: finish_task("build.project.init", dir=e.dir),
            AssetsCopyEvent: lambda e: progress_task("build.assets.copying",
                index_id=e.index_id, count=e.count, total=e.total),
            AssetsCopiedEvent: lambda e: finish_task("build.assets.copied",
                index_id=e.index_id, count=e.count),
            LibrariesPlannedEvent: lambda e: finish_task("build.libraries.planned",
                libraries_count=e.libraries_count, copy_count=e.copy_count, extract_count=e.extract_count),
            LibraryOpEvent: library_op,
            LibrariesCopiedEvent: lambda e: finish_task("build.libraries.copied",
                copy_count=e.copy_count, extract_count=e.extract_count),
            JarCopiedEvent: lambda e: finish_task("build.jar.copied", name=e.path.name),
        })
