import io
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from parser import Class, Method, ProguardMapping, parse_map_file
from stacktrace import StackFrame, split_lines


@dataclass(frozen=True)
class MemberMapping:
    """One obfuscated line range of a method, attributed to one original method."""
    obf_startline: int
    obf_endline: int
    original_class: Optional[str]
    original_method: str
    original_startline: int
    # None for inlined frames, which collapse to a single original line
    original_endline: Optional[int]


@dataclass
class ClassMapping:
    original: str
    obfuscated: str
    members: Dict[str, List[MemberMapping]] = field(default_factory=dict)


def member_from_method(record):
    line_mapping = record.line_mapping
    # without line records, 0 matches any line
    if line_mapping is None:
        startline, endline = 0, 0
        original_startline, original_endline = 0, None
    elif line_mapping.original_startline is not None:
        startline, endline = line_mapping.startline, line_mapping.endline
        original_startline = line_mapping.original_startline
        original_endline = line_mapping.original_endline
    else:
        startline, endline = line_mapping.startline, line_mapping.endline
        original_startline, original_endline = startline, endline
    return MemberMapping(
        obf_startline=startline,
        obf_endline=endline,
        original_class=record.original_class,
        original_method=record.original,
        original_startline=original_startline,
        original_endline=original_endline,
    )


def remapped_frames(frame, members):
    """Yield one original frame per member whose range covers the frame's line."""
    for member in members:
        if member.obf_endline > 0 and not member.obf_startline <= frame.line <= member.obf_endline:
            continue
        # inlined callers have no original endline and stay on their call line
        if member.original_endline is None:
            line = member.original_startline
        else:
            line = member.original_startline + frame.line - member.obf_startline
        # the file of a method inlined from another class is unknown
        if member.original_class is not None:
            yield StackFrame(member.original_class, member.original_method, line)
        else:
            yield StackFrame(frame.class_name, member.original_method, line, frame.file)


class ProguardMapper:
    """
    Remaps class names, single stack frames or complete stack traces
    using a ProGuard/R8 mapping.
    The mapper is read-only once built and can be shared between threads.
    """

    def __init__(self, mapping):
        """
        Build the index from an iterable of mapping records.
        Records other than classes and methods, including ParseErrors, are skipped.
        """
        self.classes: Dict[str, ClassMapping] = {}
        current = ClassMapping("", "")

        for record in mapping:
            if isinstance(record, Class):
                if current.original:
                    self.classes[current.obfuscated] = current
                current = ClassMapping(record.original, record.obfuscated)
            elif isinstance(record, Method):
                members = current.members.setdefault(record.obfuscated, [])
                members.append(member_from_method(record))

        if current.original:
            self.classes[current.obfuscated] = current

    @classmethod
    def from_str(cls, text):
        return cls(ProguardMapping(text))

    @classmethod
    def open(cls, path):
        return cls(parse_map_file(path))

    def remap_class(self, class_name):
        """
        Returns the original name of a fully-qualified obfuscated class,
        or None if the class is not in the mapping.
        """
        class_mapping = self.classes.get(class_name)
        if class_mapping is None:
            return None
        return class_mapping.original

    def remap_frame(self, frame):
        """
        Returns an iterator over the original frames of an obfuscated frame.
        Inlined frames produce several results, ordered top to bottom.
        Nothing is yielded when the class, the method or the line is unknown.
        """
        class_mapping = self.classes.get(frame.class_name)
        if class_mapping is None:
            return iter(())
        members = class_mapping.members.get(frame.method)
        if members is None:
            return iter(())
        return remapped_frames(replace(frame, class_name=class_mapping.original), members)

    def remap_lines(self, text):
        """
        Yield (output_line, rewritten) pairs for every line of a stack trace.
        Lines that are not frames, or frames without a mapping, are yielded as is.
        """
        for line in split_lines(text):
            frame = StackFrame.try_parse(line)
            remapped = list(self.remap_frame(frame)) if frame is not None else []
            if not remapped:
                yield line, False
                continue
            for original in remapped:
                yield f"    {original}", True

    def remap_stacktrace_with_ranges(self, text):
        """
        Returns the remapped stack trace together with the rewritten lines,
        as (1-based line number, line length) pairs.
        """
        lines = []
        ranges = []
        for line, rewritten in self.remap_lines(text):
            lines.append(f"{line}\n")
            if rewritten:
                ranges.append((len(lines), len(line)))
        return "".join(lines), ranges

    def write_stacktrace(self, text, out):
        """Write the remapped stack trace to a text stream."""
        for line, _ in self.remap_lines(text):
            out.write(f"{line}\n")

    def remap_stacktrace(self, text):
        """Returns the remapped version of a complete Java stack trace."""
        out = io.StringIO()
        self.write_stacktrace(text, out)
        return out.getvalue()
