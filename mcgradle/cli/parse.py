from argparse import ArgumentParser
from pathlib import Path

from ..builder import Context

from .output import Output
from .lang import get as _

from typing import Optional, List


# The following classes are only used for type checking and represent a typed namespace
# as produced by the arguments registered to the argument parser.

class RootNs:
    main_dir: Optional[Path]
    out_kind: str
    verbose: int
    # Initialized by main function after argument parsing.
    out: Output
    context: Context

class SearchNs(RootNs):
    input: Optional[str]

class BuildNs(RootNs):
    no_init: bool
    gradle: str
    main_class: str
    version: Optional[str]
    directory: Optional[str]


def register_arguments() -> ArgumentParser:
    parser = ArgumentParser(allow_abbrev=False, prog="mcgradle", description=_("args"))
    parser.add_argument("--main-dir", help=_("args.main_dir"), type=Path)
    parser.add_argument("--output", help=_("args.output"), dest="out_kind", choices=get_outputs(), default="human-color")
    parser.add_argument("-v", dest="verbose", help=_("args.verbose"), action="count", default=0)
    register_subcommands(parser.add_subparsers(title="subcommands", dest="subcommand"))
    return parser


def register_subcommands(subparsers):
    register_search_arguments(subparsers.add_parser("search", help=_("args.search")))
    register_build_arguments(subparsers.add_parser("build", help=_("args.build")))
    register_show_arguments(subparsers.add_parser("show", help=_("args.show")))


def register_search_arguments(parser: ArgumentParser):
    parser.add_argument("input", nargs="?")


def register_build_arguments(parser: ArgumentParser):
    parser.add_argument("--no-init", help=_("args.build.no_init"), action="store_true")
    parser.add_argument("--gradle", help=_("args.build.gradle"), default="gradle", metavar="BIN")
    parser.add_argument("--main-class", help=_("args.build.main_class"), default="Start", metavar="CLASS")
    parser.add_argument("version", nargs="?", help=_("args.build.version"))
    parser.add_argument("directory", nargs="?", help=_("args.build.directory"))


def register_show_arguments(parser: ArgumentParser):
    subparsers = parser.add_subparsers(title="subcommands", dest="show_subcommand")
    subparsers.required = True
    subparsers.add_parser("about", help=_("args.show.about"))


def get_outputs() -> List[str]:
    return ["human-color", "human", "machine"]
