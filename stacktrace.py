from dataclasses import dataclass
from typing import Optional


def split_lines(text):
    """
    Yield the lines of a text, split on "\\n" only.
    A trailing "\\r" is removed from each line and a final newline adds no empty line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith("\r") else line


@dataclass(frozen=True)
class StackFrame:
    """A single Java stack frame: `at class.method(file:line)`."""
    class_name: str
    method: str
    line: int
    file: Optional[str] = None

    @classmethod
    def try_parse(cls, line):
        """
        Parse one line of a stack trace.
        Returns None when the line is not a frame.
        """
        line = line.strip()
        if not line.startswith("at ") or not line.endswith(")"):
            return None
        qualified, sep, location = line[3:-1].partition("(")
        if not sep:
            return None
        class_name, dot, method = qualified.strip().rpartition(".")
        if not dot or not class_name or not method:
            return None
        file, colon, number = location.rpartition(":")
        if not colon or not number.isdecimal():
            return None
        return cls(class_name, method, int(number), file)

    def __str__(self):
        file = "<unknown>" if self.file is None else self.file
        return f"at {self.class_name}.{self.method}({file}:{self.line})"
