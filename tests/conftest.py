import pytest

CLASS_ONLY_MAPPING = "android.arch.core.executor.ArchTaskExecutor -> a.a.a.a.c:\n"

LINE_SHIFT_MAPPING = """\
com.Foo -> a.b:
    4:4:void bar():12:12 -> c
"""

INLINE_MAPPING = """\
com.Foo -> a.b:
    10:10:void inner():40:40 -> c
    10:10:void outer():77 -> c
"""

FOREIGN_INLINE_MAPPING = """\
com.Helper -> a.h:
    void helper() -> a
com.Foo -> a.b:
    20:20:void com.Helper.helper():5:5 -> c
    20:20:void host():88 -> c
"""

R8_MAPPING = """\
# compiler: R8
# compiler_version: 3.0.0
com.example.Main -> a:
    int counter -> b
    java.lang.String name -> c
    1:1:void foo():54:54 -> a
    1:1:void test():50 -> a
    2:2:void bar():59:59 -> a
    2:2:void foo():55 -> a
    2:2:void test():50 -> a
    3:9:void <init>(int,java.lang.String):20:26 -> <init>
    void toString() -> toString
com.example.Util -> b:
    1:3:int compute(int):100:102 -> a
"""


@pytest.fixture
def r8_mapping_file(tmp_path):
    path = tmp_path / "app.map"
    path.write_text(R8_MAPPING, encoding="utf-8")
    return str(path)
