import io

from retrace import main


def test_remap_stacktrace_file(r8_mapping_file, tmp_path, capsys):
    stacktrace = tmp_path / "crash.txt"
    stacktrace.write_text("java.lang.Error\n    at b.a(SourceFile:2)\n", encoding="utf-8")
    assert main([r8_mapping_file, "--stacktrace", str(stacktrace)]) == 0
    assert capsys.readouterr().out == (
        "java.lang.Error\n"
        "    at com.example.Util.compute(SourceFile:101)\n"
    )


def test_remap_stacktrace_stdin(r8_mapping_file, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("    at a.a(SourceFile:1)\n"))
    assert main([r8_mapping_file]) == 0
    assert capsys.readouterr().out == (
        "    at com.example.Main.foo(SourceFile:54)\n"
        "    at com.example.Main.test(SourceFile:50)\n"
    )


def test_remap_class(r8_mapping_file, capsys):
    assert main([r8_mapping_file, "--class", "a"]) == 0
    assert capsys.readouterr().out == "com.example.Main\n"
    assert main([r8_mapping_file, "--class", "zz"]) == 0
    assert capsys.readouterr().out == "zz\n"


def test_verbose(r8_mapping_file, capsys):
    assert main([r8_mapping_file, "--class", "a", "--verbose"]) == 0
    err = capsys.readouterr().err
    assert "Loaded 2 classes" in err
    assert "line info: yes" in err


def test_missing_mapping_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.map")]) == 1
    assert "cannot read mapping file" in capsys.readouterr().err


def test_missing_stacktrace_file(r8_mapping_file, tmp_path, capsys):
    assert main([r8_mapping_file, "--stacktrace", str(tmp_path / "missing.txt")]) == 1
    assert "cannot read stacktrace" in capsys.readouterr().err


def test_undecodable_stacktrace_bytes_pass_through(r8_mapping_file, tmp_path, capsys):
    stacktrace = tmp_path / "crash.txt"
    stacktrace.write_bytes(b"java.lang.Error: \xff\xfe\n    at b.a(SourceFile:2)\n")
    assert main([r8_mapping_file, "--stacktrace", str(stacktrace)]) == 0
    assert capsys.readouterr().out == (
        "java.lang.Error: \ufffd\ufffd\n"
        "    at com.example.Util.compute(SourceFile:101)\n"
    )


def test_undecodable_mapping_file(tmp_path, capsys):
    mapping = tmp_path / "broken.map"
    mapping.write_bytes(b"com.Foo -> a:\n    void \xff() -> b\n")
    assert main([str(mapping), "--class", "a"]) == 1
    assert "cannot read mapping file" in capsys.readouterr().err
