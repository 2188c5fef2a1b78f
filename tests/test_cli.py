"""Tests for the command-line interface."""

from __future__ import annotations

import json

import pytest

from site_auditor import __version__
from site_auditor.cli import create_parser, main


def test_json_to_stdout(site, capsys):
    site.write("index.html", '<img src="logo.png">')

    status = main([str(site.root), "--check", "missing-alt"])

    assert status == 0
    data = json.loads(capsys.readouterr().out)
    assert data["count"] == 1
    assert data["findings"][0]["type"] == "Missing alt"
    assert data["findings"][0]["line_number"] == 1


def test_files_and_text_output(site, tmp_path, capsys):
    site.write("a.html", "<!-- a -->")
    site.write("b.html", "<!-- b -->")
    out = tmp_path / "report.txt"

    status = main([
        str(site.root), "--files", "b.html,zzz.html",
        "--check", "html-comments", "--format", "text", "-o", str(out),
    ])

    assert status == 0
    text = out.read_text(encoding="utf-8")
    assert "b.html:1 [HTML comment]" in text
    assert "[File not found]" in text
    assert text.endswith("2 findings\n")


def test_read_only_flag(site, capsys):
    site.mkdir("sub")

    assert main([str(site.root), "--read-only"]) == 0
    assert not (site.root / "sub" / "index.php").exists()


def test_missing_directory_exits_with_error(tmp_path, capsys):
    status = main([str(tmp_path / "nope")])

    assert status == 1
    assert "does not exist" in capsys.readouterr().err


def test_binary_formats_need_output(site, capsys):
    assert main([str(site.root), "--format", "xlsx"]) == 2
    assert "--output" in capsys.readouterr().err


def test_xlsx_output(site, tmp_path):
    site.write("index.html", "<!-- note -->")
    out = tmp_path / "report.xlsx"

    assert main([str(site.root), "--check", "html-comments", "--format", "xlsx", "-o", str(out)]) == 0
    assert out.exists()


def test_bad_config_exits_with_error(site, tmp_path, capsys):
    config = tmp_path / "bad.yaml"
    config.write_text("- not\n- a mapping\n", encoding="utf-8")

    assert main([str(site.root), "--config", str(config)]) == 1
    assert capsys.readouterr().err.startswith("Error:")


def test_config_file_is_applied(site, tmp_path, capsys):
    site.write("page.html", "<p>see old.example.com</p>")
    config = tmp_path / "audit.yaml"
    config.write_text("deprecated_domains:\n  domains: [old.example.com]\n", encoding="utf-8")

    assert main([str(site.root), "--config", str(config), "--check", "old-domains"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["findings"][0]["message"] == "Deprecated domain 'old.example.com' referenced."


def test_list_checks(capsys):
    assert main(["--list-checks"]) == 0
    out = capsys.readouterr().out.split()
    assert out[0] == "missing-alt"
    assert "unused-images" in out


def test_init_config(capsys):
    assert main(["--init-config"]) == 0
    assert "ignore_marker" in capsys.readouterr().out


def test_unknown_check_rejected_by_parser():
    with pytest.raises(SystemExit):
        create_parser().parse_args([".", "--check", "nonsense"])


def test_version(capsys):
    with pytest.raises(SystemExit):
        main(["--version"])
    assert __version__ in capsys.readouterr().out
