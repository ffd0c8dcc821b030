import io
import json
import subprocess
import sys
import zipfile
from pathlib import Path

import pytest

from qdata_clean.cli import main


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_summary_only(tmp_path: Path, qubit_csv, capsys):
    path = _write(tmp_path, "runs.csv", qubit_csv)
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert "Rows: 5  Columns: 4  Quality: 60%" in out
    assert "fidelity: type=numeric missing=2 distinct=3" in out
    assert "Cleaned:" not in out
    assert "Estimated export size: " in out


def test_clean_stats_and_json_export(tmp_path: Path, qubit_csv, capsys):
    path = _write(tmp_path, "runs.csv", qubit_csv)
    out_path = tmp_path / "cleaned.json"
    code = main(
        [
            str(path),
            "--clean",
            "remove_nulls",
            "--stats",
            "qubits",
            "--export",
            "json",
            "--include-statistics",
            "--output",
            str(out_path),
        ]
    )
    assert code == 0
    out = capsys.readouterr().out
    assert "Cleaned: 5 -> 4 rows (remove_nulls)" in out
    assert "qubits: count=4 mean=7.2500" in out

    doc = json.loads(out_path.read_text(encoding="utf-8"))
    assert doc["metadata"]["processed"] is True
    assert doc["metadata"]["recordCount"] == 4
    assert doc["statistics"]["qubits"]["max"] == 12


def test_stats_without_numeric_data(tmp_path: Path, qubit_csv, capsys):
    path = _write(tmp_path, "runs.csv", qubit_csv)
    main([str(path), "--stats", "backend"])
    assert "No numeric data in column 'backend'" in capsys.readouterr().out


def test_compressed_export(tmp_path: Path, qubit_csv):
    path = _write(tmp_path, "runs.csv", qubit_csv)
    out_path = tmp_path / "runs.zip"
    main([str(path), "--export", "csv", "--compress", "--output", str(out_path)])
    with zipfile.ZipFile(io.BytesIO(out_path.read_bytes())) as zf:
        (entry,) = zf.namelist()
        assert entry.startswith("runs_processed_") and entry.endswith(".csv")


def test_bad_input_exits(tmp_path: Path):
    with pytest.raises(SystemExit):
        main([str(tmp_path / "missing.csv")])
    bad = _write(tmp_path, "notes.txt", "hello")
    with pytest.raises(SystemExit) as excinfo:
        main([str(bad)])
    assert "Unsupported file type" in str(excinfo.value)


def test_cli_help():
    result = subprocess.run(
        [sys.executable, "-m", "qdata_clean.cli", "--help"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        cwd=str(Path(__file__).resolve().parents[2]),
    )
    assert result.returncode == 0
    assert "remove_outliers" in result.stdout
