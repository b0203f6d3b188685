"""Generation of the Gradle project files and initialization of the project with the
Gradle executable.
"""

from subprocess import run, PIPE, STDOUT
from pathlib import Path

from typing import List, Optional


GITIGNORE_CONTENT = "/runs"
DEFAULT_MAIN_CLASS = "Start"


def generate_build_script(java_major: int, *,
    main_class: str = DEFAULT_MAIN_CLASS,
    libraries_dir: str = "runs/libraries",
    natives_dir: str = "libraries",
    work_dir: str = "runs"
) -> str:
    """Generate the Groovy `build.gradle` script of the project.

    The flat libraries directory is added as a dependency and the Java source and
    target compatibility are set to the required major version. A `runClient` task
    starts the main class from the working directory, the natives directory is
    relative to it.
    """

    lines = [
        "apply plugin: 'java'",
        "apply plugin: 'application'",
        "dependencies {",
        f"    implementation fileTree('{libraries_dir}')",
        "}",
        f"sourceCompatibility = {java_major}",
        f"targetCompatibility = {java_major}",
        "task runClient(type: JavaExec) {",
        f"    main = '{main_class}'",
        "    classpath = sourceSets.main.runtimeClasspath",
        f"    jvmArgs = [\"-Djava.library.path={natives_dir}\"]",
        f"    workingDir = file('{work_dir}')",
        "}",
    ]

    return "\n".join(lines) + "\n"


def gradle_init_args(gradle_bin: str) -> List[str]:
    return [gradle_bin, "init", "--type", "java-application"]


def init_gradle_project(project_dir: Path, gradle_bin: str = "gradle") -> None:
    """Run `gradle init` for a Java application in the given directory, which must
    exist.

    :raises GradleInitError: If the executable can't be started or exits with an error.
    """

    args = gradle_init_args(gradle_bin)

    try:
        completed = run(args, cwd=str(project_dir), stdin=PIPE, stdout=PIPE, stderr=STDOUT)
    except OSError as e:
        raise GradleInitError(args, None, str(e))

    if completed.returncode != 0:
        raise GradleInitError(args, completed.returncode, completed.stdout.decode(errors="replace"))


class GradleInitError(Exception):
    """Raised when the Gradle initialization fails. The exit code is None if the process
    could not be started.
    """

    def __init__(self, command: List[str], code: Optional[int], output: str) -> None:
        self.command = command
        self.code = code
        self.output = output

    def __str__(self) -> str:
        return f"{' '.join(self.command)}: {self.code}"
