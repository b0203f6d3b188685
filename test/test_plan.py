from pathlib import Path
import pytest

from conftest import ASSET_HASH_A, ASSET_HASH_B, make_descriptor, write_zip


def _load_test_descriptor(game_dir: Path):
    from mcgradle.metadata import load_version_descriptor
    return load_version_descriptor(game_dir / "versions" / "test" / "test.json")


def test_asset_copy_plan(tmp_path: Path):

    from mcgradle.metadata import parse_asset_index
    from mcgradle.plan import build_asset_copy_plan, CopyOp

    index = parse_asset_index({"objects": {"a": {"hash": ASSET_HASH_A}}})
    src_dir = tmp_path / "src" / "objects"
    dst_dir = tmp_path / "dst" / "objects"

    ops = build_asset_copy_plan(index, src_dir, dst_dir)
    assert len(ops) == 1

    op = ops[0]
    assert isinstance(op, CopyOp)
    assert op.src == src_dir / "ab" / ASSET_HASH_A
    assert op.dst == dst_dir / "ab" / ASSET_HASH_A
    assert op.ensure_dir == dst_dir / "ab"


def test_asset_copy_plan_repeated_hash(tmp_path: Path):

    from mcgradle.metadata import parse_asset_index
    from mcgradle.plan import build_asset_copy_plan

    index = parse_asset_index({"objects": {
        "a": {"hash": ASSET_HASH_A},
        "b": {"hash": ASSET_HASH_A},
        "c": {"hash": ASSET_HASH_B},
    }})

    ops = build_asset_copy_plan(index, tmp_path / "src", tmp_path / "dst")
    assert len(ops) == 3
    assert len({op.dst for op in ops}) == 2


def test_library_copy_plan(game_dir: Path, tmp_path: Path):

    from mcgradle.host import Platform
    from mcgradle.plan import build_library_copy_plan, CopyFileOp, ExtractArchiveOp

    descriptor = _load_test_descriptor(game_dir)
    src_dir = game_dir / "libraries"
    dst_dir = tmp_path / "runs" / "libraries"

    ops = build_library_copy_plan(descriptor.libraries, Platform.LINUX, src_dir, dst_dir)

    # The 'bar' library is not installed and is skipped.
    assert len(ops) == 2

    assert isinstance(ops[0], CopyFileOp)
    assert ops[0].src == src_dir / "com" / "foo" / "foo-1.0.jar"
    assert ops[0].dst == dst_dir / "foo-1.0.jar"

    assert isinstance(ops[1], ExtractArchiveOp)
    assert ops[1].archive == src_dir / "org" / "lwjgl" / "lwjgl-platform" / "lwjgl-platform-natives-linux.jar"
    assert ops[1].dst_dir == dst_dir


def test_library_copy_plan_scenario(tmp_path: Path):

    from mcgradle.metadata import parse_version_descriptor
    from mcgradle.host import Platform
    from mcgradle.plan import build_library_copy_plan, CopyFileOp

    descriptor = parse_version_descriptor(make_descriptor([
        {"downloads": {"artifact": {"path": "com/foo/foo-1.0.jar"}}}
    ]))

    src_dir = tmp_path / "libraries"
    (src_dir / "com" / "foo").mkdir(parents=True)
    (src_dir / "com" / "foo" / "foo-1.0.jar").write_bytes(b"foo")

    ops = build_library_copy_plan(descriptor.libraries, Platform.WINDOWS, src_dir, tmp_path / "dst")
    assert len(ops) == 1
    assert isinstance(ops[0], CopyFileOp)
    assert ops[0].dst.name == "foo-1.0.jar"


def test_library_copy_plan_platforms(game_dir: Path, tmp_path: Path):

    from mcgradle.host import Platform
    from mcgradle.plan import build_library_copy_plan, ExtractArchiveOp

    descriptor = _load_test_descriptor(game_dir)

    for platform in Platform:
        ops = build_library_copy_plan(descriptor.libraries, platform, game_dir / "libraries", tmp_path)
        archives = [op.archive.name for op in ops if isinstance(op, ExtractArchiveOp)]
        assert archives == [f"lwjgl-platform-natives-{platform.value}.jar"]


def test_library_copy_plan_deterministic(game_dir: Path, tmp_path: Path):

    from mcgradle.host import Platform
    from mcgradle.plan import build_library_copy_plan

    def plan():
        descriptor = _load_test_descriptor(game_dir)
        ops = build_library_copy_plan(descriptor.libraries, Platform.OSX, game_dir / "libraries", tmp_path)
        return [(type(op), *(getattr(op, attr) for attr in op.__slots__)) for op in ops]

    assert plan() == plan()


def test_library_copy_plan_missing_natives(tmp_path: Path):

    from mcgradle.metadata import parse_version_descriptor
    from mcgradle.host import Platform
    from mcgradle.plan import build_library_copy_plan

    from conftest import make_natives_library

    descriptor = parse_version_descriptor(make_descriptor([
        make_natives_library("jinput-platform", platforms=("windows",)),
    ]))

    # No natives for this platform, and natives not installed for the other one.
    assert build_library_copy_plan(descriptor.libraries, Platform.LINUX, tmp_path, tmp_path / "dst") == []
    assert build_library_copy_plan(descriptor.libraries, Platform.WINDOWS, tmp_path, tmp_path / "dst") == []


def test_execute_plan(game_dir: Path, tmp_path: Path):

    from mcgradle.metadata import load_asset_index
    from mcgradle.host import Platform
    from mcgradle.plan import build_asset_copy_plan, build_library_copy_plan, execute_plan

    index = load_asset_index(game_dir / "assets" / "indexes" / "17.json")
    objects_dir = tmp_path / "objects"
    ops = build_asset_copy_plan(index, game_dir / "assets" / "objects", objects_dir)

    executed = []
    assert execute_plan(ops, executed.append) == 2
    assert executed == ops
    assert (objects_dir / "ab" / ASSET_HASH_A).read_bytes() == ASSET_HASH_A.encode()
    assert (objects_dir / "cd" / ASSET_HASH_B).read_bytes() == ASSET_HASH_B.encode()

    libraries_dir = tmp_path / "libraries"
    descriptor = _load_test_descriptor(game_dir)
    ops = build_library_copy_plan(descriptor.libraries, Platform.WINDOWS, game_dir / "libraries", libraries_dir)
    assert execute_plan(ops) == 2
    assert (libraries_dir / "foo-1.0.jar").read_bytes() == b"foo"
    assert (libraries_dir / "lwjgl.dll").read_bytes() == b"native"
    assert (libraries_dir / "META-INF" / "MANIFEST.MF").is_file()


def test_execute_plan_abort(tmp_path: Path):

    from mcgradle.plan import CopyFileOp, execute_plan, MaterializeError

    src_file = tmp_path / "foo.jar"
    src_file.write_bytes(b"foo")

    ops = [
        CopyFileOp(src_file, tmp_path / "dst" / "foo.jar"),
        CopyFileOp(tmp_path / "missing.jar", tmp_path / "dst" / "missing.jar"),
        CopyFileOp(src_file, tmp_path / "dst" / "bar.jar"),
    ]

    with pytest.raises(MaterializeError) as info:
        execute_plan(ops)

    assert info.value.operation == "copy"
    assert info.value.path == tmp_path / "missing.jar"
    assert isinstance(info.value.__cause__, OSError)

    # No rollback, and nothing after the failing operation.
    assert (tmp_path / "dst" / "foo.jar").is_file()
    assert not (tmp_path / "dst" / "bar.jar").exists()


def test_copy_error_destination(tmp_path: Path):

    from mcgradle.plan import CopyOp, CopyFileOp, MaterializeError

    src_file = tmp_path / "foo.jar"
    src_file.write_bytes(b"foo")

    # A regular file where the destination directory should be created.
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"")

    with pytest.raises(MaterializeError) as info:
        CopyFileOp(src_file, blocker / "foo.jar").execute()
    assert info.value.operation == "copy"
    assert info.value.path == blocker

    with pytest.raises(MaterializeError) as info:
        CopyOp(src_file, blocker / "foo.jar", blocker).execute()
    assert info.value.path == blocker

    # The destination is an existing directory, opening it for writing fails.
    dst_dir = tmp_path / "dst"
    (dst_dir / "foo.jar").mkdir(parents=True)

    with pytest.raises(MaterializeError) as info:
        CopyFileOp(src_file, dst_dir / "foo.jar").execute()
    assert info.value.path == dst_dir / "foo.jar"


def test_extract_errors(tmp_path: Path):

    from mcgradle.plan import ExtractArchiveOp, MaterializeError

    bad_archive = tmp_path / "bad.jar"
    bad_archive.write_bytes(b"not a zip")

    with pytest.raises(MaterializeError) as info:
        ExtractArchiveOp(bad_archive, tmp_path / "dst").execute()
    assert info.value.operation == "extract"
    assert info.value.path == bad_archive

    evil_archive = tmp_path / "evil.jar"
    write_zip(evil_archive, {"../evil.so": b"evil"})

    with pytest.raises(MaterializeError) as info:
        ExtractArchiveOp(evil_archive, tmp_path / "dst").execute()
    assert "unsafe" in str(info.value)
    assert not (tmp_path / "evil.so").exists()


def test_materialize_error_str(tmp_path: Path):

    from mcgradle.plan import MaterializeError

    assert str(MaterializeError("copy", Path("foo.jar"))) == "copy foo.jar"
    assert str(MaterializeError("extract", Path("foo.jar"), "reason")) == "extract foo.jar: reason"
