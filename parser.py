import re
import uuid
from dataclasses import dataclass
from typing import Iterator, Optional

from stacktrace import split_lines

# Namespace used to derive a stable identifier from the mapping contents
PROGUARD_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_DNS, "guardsquare.com")

# [startline:endline:]type name(arguments)[:original_startline[:original_endline]]
METHOD_PATTERN = re.compile(
    r'^(?:(\d+):(\d+):)?(\S+)\s+([^\s(]+)\(([^)]*)\)(?::(\d+)(?::(\d+))?)?$'
)
FIELD_PATTERN = re.compile(r'^([^\s:()]+)\s+([^\s:()]+)$')


@dataclass(frozen=True)
class Header:
    key: str
    value: Optional[str] = None


@dataclass(frozen=True)
class Class:
    original: str
    obfuscated: str


@dataclass(frozen=True)
class Field:
    ty: str
    original: str
    obfuscated: str


@dataclass(frozen=True)
class LineMapping:
    """Obfuscated line range of a method, with the optional original range."""
    startline: int
    endline: int
    original_startline: Optional[int] = None
    original_endline: Optional[int] = None


@dataclass(frozen=True)
class Method:
    ty: str
    original: str
    obfuscated: str
    arguments: str = ""
    original_class: Optional[str] = None
    line_mapping: Optional[LineMapping] = None


@dataclass(frozen=True)
class ParseError:
    """A mapping line that could not be understood. Yielded, never raised."""
    line: str
    reason: str


def parse_record(line):
    """
    Parse a single mapping line.
    Returns a record, a ParseError, or None for blank lines.
    """
    stripped = line.strip()
    if not stripped:
        return None

    if stripped.startswith('#'):
        body = stripped[1:].strip()
        if ':' in body:
            key, value = body.split(':', 1)
            return Header(key.strip(), value.strip())
        return Header(body)

    # Class mapping
    if not line[0].isspace():
        if not stripped.endswith(':') or '->' not in stripped:
            return ParseError(line, "expected 'original -> obfuscated:'")
        original, obfuscated = (part.strip() for part in stripped[:-1].split('->', 1))
        if not original or not obfuscated:
            return ParseError(line, "empty class name")
        return Class(original, obfuscated)

    # Member mapping (field or method)
    if '->' not in stripped:
        return ParseError(line, "missing '->'")
    before_arrow, obfuscated = stripped.rsplit('->', 1)
    before_arrow = before_arrow.strip()
    obfuscated = obfuscated.strip()
    if not obfuscated:
        return ParseError(line, "empty obfuscated name")

    match = METHOD_PATTERN.match(before_arrow)
    if match:
        start, end, ty, name, arguments, original_start, original_end = match.groups()
        original_class = None
        if '.' in name:
            original_class, _, name = name.rpartition('.')
        line_mapping = None
        if start is not None:
            line_mapping = LineMapping(
                int(start),
                int(end),
                int(original_start) if original_start is not None else None,
                int(original_end) if original_end is not None else None,
            )
        return Method(ty, name, obfuscated, arguments, original_class, line_mapping)

    match = FIELD_PATTERN.match(before_arrow)
    if match:
        ty, name = match.groups()
        return Field(ty, name, obfuscated)

    return ParseError(line, "unrecognized member mapping")


def parse_records(text) -> Iterator:
    """Lazily yield the records of a mapping text, including ParseErrors."""
    for line in split_lines(text):
        record = parse_record(line)
        if record is not None:
            yield record


class ProguardMapping:
    """
    A ProGuard/R8 mapping text.
    Iterating it yields records; every iteration starts from the beginning.
    """

    def __init__(self, source):
        self.source = source

    def __iter__(self):
        return parse_records(self.source)

    def has_line_info(self):
        """Whether any method record carries line information."""
        for record in self:
            if isinstance(record, Method) and record.line_mapping is not None:
                return True
        return False

    def uuid(self):
        return uuid.uuid5(PROGUARD_NAMESPACE, self.source)


def parse_map_file(path):
    """
    Read a mapping file from disk.
    Returns a ProguardMapping; I/O errors are left to the caller.
    """
    with open(path, "r", encoding="utf-8") as f:
        return ProguardMapping(f.read())
