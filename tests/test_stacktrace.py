import pytest

from stacktrace import StackFrame, split_lines


def test_parse_frame():
    frame = StackFrame.try_parse("    at a.b.c(SourceFile:10)")
    assert frame == StackFrame("a.b", "c", 10, "SourceFile")


def test_parse_frame_with_tab_and_inner_class():
    frame = StackFrame.try_parse("\tat com.example.Main$Inner.run(Main.java:42)")
    assert frame.class_name == "com.example.Main$Inner"
    assert frame.method == "run"
    assert frame.file == "Main.java"
    assert frame.line == 42


def test_parse_frame_with_empty_file_keeps_it():
    frame = StackFrame.try_parse("at a.b.c(:7)")
    assert frame == StackFrame("a.b", "c", 7, "")
    assert str(frame) == "at a.b.c(:7)"


@pytest.mark.parametrize("line", [
    "java.lang.RuntimeException: boom",
    "Caused by: java.lang.NullPointerException",
    "    ... 12 more",
    "    at a.b.c(Native Method)",
    "    at a.b.c(Unknown Source)",
    "    at a.b.c(SourceFile:x)",
    "    at abc(SourceFile:1)",
    "    at a.b.c SourceFile:1)",
    "",
])
def test_not_a_frame(line):
    assert StackFrame.try_parse(line) is None


def test_str_renders_frame_line():
    assert str(StackFrame("com.Foo", "bar", 12, "Foo.java")) == "at com.Foo.bar(Foo.java:12)"
    assert str(StackFrame("com.Helper", "helper", 5)) == "at com.Helper.helper(<unknown>:5)"


def test_split_lines_only_on_newline():
    text = "first\x0cstill first\r\nsecond\u2028same\n\nfourth\n"
    assert list(split_lines(text)) == ["first\x0cstill first", "second\u2028same", "", "fourth"]


def test_split_lines_without_final_newline():
    assert list(split_lines("a\nb")) == ["a", "b"]
    assert list(split_lines("")) == []
