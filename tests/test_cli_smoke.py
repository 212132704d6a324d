from __future__ import annotations

import shutil
from pathlib import Path

import orjson
import pytest

from cli import main


def _copy_fixture(root: Path) -> None:
    fixture_repo = Path(__file__).parent / "fixtures" / "mini_library"
    shutil.copytree(fixture_repo, root)


def test_cli_generate_smoke(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)

    out_dir = tmp_path / "artifacts"
    exit_code = main(["generate", str(repo_root), "--out-dir", str(out_dir)])

    assert exit_code == 0
    assert (out_dir / "symbols.jsonl").exists()


def test_generate_default_output_dir_from_fixture(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)

    assert not (repo_root / ".rpglemap").exists(), "output dir must not pre-exist"
    exit_code = main(["generate", str(repo_root)])

    default_out_dir = repo_root / ".rpglemap"
    assert exit_code == 0
    assert default_out_dir.exists()
    assert any(default_out_dir.iterdir())


def test_generate_reports_config_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)
    (repo_root / "rpglemap.toml").write_text(
        'output_dir = "../outside"', encoding="utf-8"
    )

    exit_code = main(["generate", str(repo_root)])

    assert exit_code == 2
    assert "escapes the project root" in capsys.readouterr().err


def test_cli_symbols_prints_model(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)

    exit_code = main(
        [
            "symbols",
            str(repo_root / "src" / "orders.rpgle"),
            "--root",
            str(repo_root),
        ]
    )

    assert exit_code == 0
    model = orjson.loads(capsys.readouterr().out)
    assert [c["name"] for c in model["constants"]] == ["MAX_ORDERS"]
    assert [p["name"] for p in model["procedures"]] == ["CloseOrder", "FormatDate"]
    assert model["procedures"][1]["position"] == {
        "path": "/INC/DATES.RPGLEINC",
        "line": 5,
    }


def test_cli_symbols_missing_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    missing = tmp_path / "missing.rpgle"
    exit_code = main(["symbols", str(missing), "--root", str(tmp_path)])

    assert exit_code == 2
    assert "error:" in capsys.readouterr().err


def test_cli_resolve_member_target(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(
        [
            "resolve",
            "/DEVLIB/QRPGLESRC/PGM.rpgle",
            "qrpgleref,utils",
            "--scheme",
            "member",
        ]
    )

    assert exit_code == 0
    assert capsys.readouterr().out == "/DEVLIB/QRPGLEREF/UTILS (member)\n"


def test_cli_resolve_stream_target_with_home_dir(
    capsys: pytest.CaptureFixture[str],
) -> None:
    exit_code = main(
        [
            "resolve",
            "/home/dev/pgm.rpgle",
            "'inc/x.rpgleinc'",
            "--home-dir",
            "/home/dev",
        ]
    )

    assert exit_code == 0
    assert capsys.readouterr().out == "/HOME/DEV/INC/X.RPGLEINC (streamfile)\n"


def test_cli_resolve_unresolvable_target(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.chdir(tmp_path)

    exit_code = main(["resolve", "/PGM.rpgle", "UTILS", "--scheme", "member"])

    assert exit_code == 1
    assert "Cannot resolve member include" in capsys.readouterr().err
