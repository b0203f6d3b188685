"""Utilities specific to formatting the output of the CLI.
"""

from .lang import get_raw as _raw

import shutil
import sys
import re

from typing import List, Tuple, Union, Optional


class OutputTable:
    """Base class for formatting tables.
    """

    def __init__(self) -> None:
        self.rows: List[Union[None, Tuple[str, ...]]] = []
        self.columns_length: List[int] = []

    def add(self, *cells):
        """Add a row to the table.
        """

        cells_str = tuple(map(str, cells))
        self.rows.append(cells_str)

        for i, cell in enumerate(cells_str):
            if i < len(self.columns_length):
                self.columns_length[i] = max(self.columns_length[i], len(cell))
            else:
                self.columns_length.append(len(cell))

    def separator(self) -> None:
        """Add a separator to the table.
        """
        self.rows.append(None)

    def print(self) -> None:
        """Print the table to the output.
        """
        raise NotImplementedError


class Output:
    """This class is used to abstract the output of the CLI. This particular class is
    abstract and the implementation differs depending on the desired output format.
    """

    def table(self) -> OutputTable:
        """Create a table builder that you can use to add rows and separator and them
        print a table, adapted to the implementation.
        """
        raise NotImplementedError

    def task(self, state: Optional[str], key: Optional[str], **kwargs) -> None:
        """Update the current task (or create it if not the case).
        """
        raise NotImplementedError

    def finish(self) -> None:
        """Finish any active task.
        """
        raise NotImplementedError

    def prompt(self, key: str) -> Optional[str]:
        """Prompt for a line to come on standard input, the given message key is used
        as the prompt's message. None is returned on interrupt or end of file.
        """
        raise NotImplementedError


class HumanOutput(Output):
    """Output for a terminal, each task is printed on a single line that is rewritten
    in place until the task is finished.
    """

    state_colors = {
        "OK": "\033[92m",
        "FAILED": "\033[31m",
        "INFO": "\033[34m",
        "HALT": "\033[33m",
    }

    def __init__(self, color: bool) -> None:
        super().__init__()
        self.color = color
        self.line_len: Optional[int] = None

    def table(self) -> OutputTable:
        return HumanTable()

    def format_state(self, state: Optional[str]) -> str:
        if state is None:
            return " " * 9
        color = self.state_colors.get(state) if self.color else None
        if color is None:
            return f"[{state:^6s}] "
        return f"[{color}{state:^6s}\033[0m] "

    def task(self, state: Optional[str], key: Optional[str], **kwargs) -> None:

        msg = "" if key is None else _raw(key, kwargs)

        # Keep the line within the terminal, the state takes 9 columns.
        max_len = shutil.get_terminal_size().columns - 9
        if max_len >= 11 and len(msg) > max_len:
            msg = msg[:max_len - 3] + "..."

        padding = ""
        if self.line_len is not None and self.line_len > len(msg):
            padding = " " * (self.line_len - len(msg))

        sys.stdout.write(f"\r{self.format_state(state)}{msg}{padding}")
        sys.stdout.flush()
        self.line_len = len(msg)

    def finish(self) -> None:
        if self.line_len is not None:
            sys.stdout.write("\n")
            self.line_len = None

    def prompt(self, key: str) -> Optional[str]:
        return _read_line(_raw(key, None))


class HumanTable(OutputTable):

    def print(self) -> None:

        borders = ["─" * length for length in self.columns_length]
        cell_formats = [f"{{:{length}s}}" for length in self.columns_length]

        lines = ["┌─{}─┐".format("─┬─".join(borders))]
        for row in self.rows:
            if row is None:
                lines.append("├─{}─┤".format("─┼─".join(borders)))
            else:
                cells = list(row) + [""] * (len(cell_formats) - len(row))
                lines.append("│ {} │".format(" │ ".join(fmt.format(cell) for fmt, cell in zip(cell_formats, cells))))
        lines.append("└─{}─┘".format("─┴─".join(borders)))

        print("\n".join(lines))


class MachineOutput(Output):

    escape_re = re.compile("[\\n\\r,]")

    @classmethod
    def print_escape(cls, s: str) -> str:
        return re.sub(cls.escape_re, lambda match: "\\" + {10: "n", 13: "r"}.get(ord(match.group()), match.group()), s)

    def print_function(self, func: str, *args: str, **kwargs) -> None:
        """Print a machine-readable line for a function with some parameters. Keyword
        arguments are printed as `key=value` after positional ones.
        """
        params = [*args, *(f"{k}={v}" for k, v in kwargs.items())]
        print(f"{func}:{','.join(map(self.print_escape, params))}")

    def table(self) -> OutputTable:
        return MachineTable(self)

    def task(self, state: Optional[str], key: Optional[str], **kwargs) -> None:
        self.print_function("task", str(state), str(key), **kwargs)

    def finish(self) -> None:
        pass

    def prompt(self, key: str) -> Optional[str]:
        self.print_function("prompt", key)
        return _read_line("")


class MachineTable(OutputTable):

    def __init__(self, out: MachineOutput) -> None:
        super().__init__()
        self.out = out

    def print(self) -> None:
        self.out.print_function("table", str(len(self.rows)))
        for row in self.rows:
            if row is None:
                self.out.print_function("sep")
            else:
                self.out.print_function("row", *row)


def _read_line(message: str) -> Optional[str]:
    print(message, end="", flush=True)
    try:
        return input("")
    except (KeyboardInterrupt, EOFError):
        return None
