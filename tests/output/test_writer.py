import pytest

from svdhtml.output.writer import OutputError, write_documents


def test_writes_all_documents(tmp_path):
    out = tmp_path / "site"

    written = write_documents({"index.html": "<p>i</p>", "UART0.html": "<p>u</p>"}, out)

    assert written == [out / "index.html", out / "UART0.html"]
    assert (out / "index.html").read_text(encoding="utf-8") == "<p>i</p>"
    assert (out / "UART0.html").read_text(encoding="utf-8") == "<p>u</p>"


def test_rejects_paths_outside_output_dir(tmp_path):
    out = tmp_path / "site"

    with pytest.raises(OutputError):
        write_documents({"ok.html": "x", "../evil.html": "x"}, out)

    # names are checked before anything is written
    assert not out.exists()


def test_os_errors_are_wrapped(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(OutputError):
        write_documents({"index.html": "x"}, blocker)
