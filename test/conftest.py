from zipfile import ZipFile
from pathlib import Path
import json
import pytest


ASSET_HASH_A = "abcd1234" * 5
ASSET_HASH_B = "cd" + "0" * 38


def make_descriptor(libraries=None, asset_index_id="17", java_major=17) -> dict:
    return {
        "id": "test",
        "assetIndex": {"id": asset_index_id, "url": "https://example.invalid/17.json"},
        "javaVersion": {"component": "java-runtime-gamma", "majorVersion": java_major},
        "libraries": [] if libraries is None else libraries,
    }


def make_natives_library(name: str, platforms=("linux", "windows", "osx"), artifact: bool = False) -> dict:
    downloads = {
        "classifiers": {
            f"natives-{platform}": {"path": f"org/lwjgl/{name}/{name}-natives-{platform}.jar"}
            for platform in platforms
        }
    }
    if artifact:
        downloads["artifact"] = {"path": f"org/lwjgl/{name}/{name}.jar"}
    return {"name": f"org.lwjgl:{name}:2.9.4", "downloads": downloads}


def write_zip(file: Path, members: dict) -> None:
    file.parent.mkdir(parents=True, exist_ok=True)
    with ZipFile(file, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)


@pytest.fixture
def game_dir(tmp_path: Path) -> Path:
    """This fixture creates a fake game's installation with a 'test' version, two assets
    objects, a regular library and a natives library for every platform.
    """

    main_dir = tmp_path / "minecraft"

    version_dir = main_dir / "versions" / "test"
    version_dir.mkdir(parents=True)
    descriptor = make_descriptor([
        {"name": "com.foo:foo:1.0", "downloads": {"artifact": {"path": "com/foo/foo-1.0.jar"}}},
        {"name": "com.bar:bar:2.0", "downloads": {"artifact": {"path": "com/bar/bar-2.0.jar"}}},
        make_natives_library("lwjgl-platform"),
    ])
    (version_dir / "test.json").write_text(json.dumps(descriptor))
    (version_dir / "test.jar").write_bytes(b"client jar")

    indexes_dir = main_dir / "assets" / "indexes"
    indexes_dir.mkdir(parents=True)
    (indexes_dir / "17.json").write_text(json.dumps({"objects": {
        "minecraft/sounds/a.ogg": {"hash": ASSET_HASH_A, "size": 5},
        "minecraft/lang/b.json": {"hash": ASSET_HASH_B, "size": 5},
    }}))

    objects_dir = main_dir / "assets" / "objects"
    for asset_hash in (ASSET_HASH_A, ASSET_HASH_B):
        (objects_dir / asset_hash[:2]).mkdir(parents=True, exist_ok=True)
        (objects_dir / asset_hash[:2] / asset_hash).write_bytes(asset_hash.encode())

    # The 'bar' library is intentionally not installed.
    libraries_dir = main_dir / "libraries"
    (libraries_dir / "com" / "foo").mkdir(parents=True)
    (libraries_dir / "com" / "foo" / "foo-1.0.jar").write_bytes(b"foo")

    for platform, native_name in (("linux", "liblwjgl.so"), ("windows", "lwjgl.dll"), ("osx", "liblwjgl.dylib")):
        write_zip(libraries_dir / "org" / "lwjgl" / "lwjgl-platform" / f"lwjgl-platform-natives-{platform}.jar", {
            native_name: b"native",
            "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\n",
        })

    return main_dir
