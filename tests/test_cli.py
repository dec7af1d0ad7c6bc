import pytest

from svdhtml.cli import main, run


@pytest.mark.integration
def test_main_writes_pages(uart_svd_file, tmp_path):
    out = tmp_path / "html"

    rc = main([str(uart_svd_file), "-o", str(out), "--quiet"])

    assert rc == 0
    assert sorted(p.name for p in out.iterdir()) == [
        "UART0.html",
        "UART1.html",
        "index.html",
    ]


@pytest.mark.integration
def test_single_renderer_from_command_line(uart_svd_file, tmp_path):
    out = tmp_path / "html"

    rc = main([str(uart_svd_file), "-o", str(out), "--renderer", "single", "--quiet"])

    assert rc == 0
    assert [p.name for p in out.iterdir()] == ["index.html"]


@pytest.mark.integration
def test_renderer_from_config(uart_svd_file, tmp_path, write_yaml):
    config = write_yaml({"renderer": "single", "index_name": "acme.html"})

    written = run(uart_svd_file, tmp_path / "html", config_path=config)

    assert [p.name for p in written] == ["acme.html"]


def test_overlap_fails_without_output(svd_document, tmp_path, capsys):
    fields = (
        "<field><name>BAUD</name><bitRange>[15:4]</bitRange></field>"
        "<field><name>MODE</name><bitOffset>0</bitOffset><bitWidth>6</bitWidth></field>"
    )
    doc = svd_document(
        "<peripheral><name>UART0</name><baseAddress>0x40000000</baseAddress>"
        "<registers><register><name>CTRL</name><addressOffset>0</addressOffset>"
        f"<fields>{fields}</fields></register></registers></peripheral>"
    )
    svd = tmp_path / "bad.svd"
    svd.write_text(doc, encoding="utf-8")
    out = tmp_path / "html"

    rc = main([str(svd), "-o", str(out), "--quiet"])

    assert rc == 1
    assert not out.exists()
    err = capsys.readouterr().err
    assert "BAUD" in err and "MODE" in err
    assert "ACME32.UART0.CTRL" in err


def test_missing_input_reports_error(tmp_path, capsys):
    rc = main([str(tmp_path / "missing.svd"), "-o", str(tmp_path / "out"), "--quiet"])

    assert rc == 1
    assert "missing.svd" in capsys.readouterr().err


def test_bad_config_reports_error(uart_svd_file, tmp_path, write_yaml, capsys):
    config = write_yaml({"renderer": "pdf"})

    rc = main([str(uart_svd_file), "-o", str(tmp_path / "out"), "--config", str(config)])

    assert rc == 1
    assert "pdf" in capsys.readouterr().err


def test_argparse_errors_exit_2(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code == 2
