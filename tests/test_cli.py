import io
import json

import pytest

import main
from giro_scanner.utils.exceptions import FragmentSourceNotFoundError
from giro_scanner.utils.helpers import read_fragments


def test_complete_scan_prints_report(fragments_file, capsys):
    path = fragments_file("H  #79927398713  #  ", "#  100  00 8 >  90001193#41#")

    assert main.main(["--input", str(path), "--quiet"]) == main.EXIT_COMPLETE

    out = capsys.readouterr().out
    assert "Reference:  79927398713" in out
    assert "Amount:     100,00 SEK" in out
    assert "Account:    BG 9000-1193" in out
    assert "Status:     complete" in out


def test_json_output(fragments_file, capsys):
    path = fragments_file("H  #79927398713  #  100  00 8 >  90001193#41#")

    assert main.main(["--input", str(path), "--json", "--quiet"]) == main.EXIT_COMPLETE

    data = json.loads(capsys.readouterr().out)
    assert data["complete"] is True
    assert data["invoice"]["formatted_amount"] == "100,00"


def test_incomplete_scan(fragments_file, capsys):
    path = fragments_file("  100  00 8 >")

    assert main.main(["--input", str(path), "--quiet"]) == main.EXIT_INCOMPLETE
    assert "Missing:    reference, giro_account" in capsys.readouterr().out


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("H  #79927398713  #  100  00 8 >  90001193#41#\n"))

    assert main.main(["--input", "-", "--json", "--quiet"]) == main.EXIT_COMPLETE
    assert json.loads(capsys.readouterr().out)["invoice"]["type"] == "BG"


def test_all_flag_reads_past_completion(fragments_file, capsys):
    line = "H  #79927398713  #  100  00 8 >  90001193#41#"
    path = fragments_file(line, line, line)

    main.main(["--input", str(path), "--json", "--all", "--quiet"])

    assert json.loads(capsys.readouterr().out)["fragments_read"] == 3


def test_missing_input_file(tmp_path):
    assert main.main(["--input", str(tmp_path / "missing.txt"), "--quiet"]) == main.EXIT_ERROR


def test_bad_fragment_limit(fragments_file):
    path = fragments_file("  100  00 8 >")
    assert main.main(["--input", str(path), "--max-fragments", "0", "--quiet"]) == main.EXIT_ERROR


def test_missing_config_file(fragments_file, tmp_path, capsys):
    path = fragments_file("  100  00 8 >")

    code = main.main(["--input", str(path), "--config", str(tmp_path / "none.yaml")])

    assert code == main.EXIT_ERROR
    assert "Configuration file not found" in capsys.readouterr().err


def test_non_mapping_config_file(fragments_file, tmp_path, capsys):
    path = fragments_file("  100  00 8 >")
    settings = tmp_path / "list.yaml"
    settings.write_text("- scanner\n", encoding="utf-8")

    code = main.main(["--input", str(path), "--config", str(settings)])

    assert code == main.EXIT_ERROR
    assert "must contain a mapping" in capsys.readouterr().err


def test_read_fragments_keeps_field_whitespace(fragments_file):
    path = fragments_file("H  #79927398713  #  ", "", "   ", "90001193#41#")

    assert list(read_fragments(path)) == ["H  #79927398713  #  ", "90001193#41#"]


def test_read_fragments_reports_missing_file_eagerly(tmp_path):
    with pytest.raises(FragmentSourceNotFoundError):
        read_fragments(tmp_path / "missing.txt")
