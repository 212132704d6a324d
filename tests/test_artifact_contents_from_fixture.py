from __future__ import annotations

import shutil
from pathlib import Path

from artifacts.models.symbols import ARTIFACT_SCHEMA_VERSION, SYMBOLS_JSONL
from artifacts.utils import _load_jsonl
from artifacts.write import generate_all_artifacts
from settings.config import RpgleMapConfig


def _copy_fixture(repo_root: Path) -> None:
    fixture_root = Path(__file__).parent / "fixtures" / "mini_library"
    shutil.copytree(fixture_root, repo_root)


def test_artifact_contents_generated_from_committed_fixture(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)

    out_dir = tmp_path / "artifacts"
    result = generate_all_artifacts(root=repo_root, out_dir=out_dir)

    # legacy/counter.rpgle is fixed-format and skipped.
    assert result["document_count"] == 2
    assert result["artifacts"] == [str(out_dir / SYMBOLS_JSONL)]

    symbols = _load_jsonl(out_dir / SYMBOLS_JSONL)
    assert result["symbol_count"] == len(symbols) == 4
    assert all(r["schema_version"] == ARTIFACT_SCHEMA_VERSION for r in symbols)

    observed = [
        (r["document"], r["path"], r["line"], r["kind"], r["name"]) for r in symbols
    ]
    assert observed == [
        ("/inc/dates.rpgleinc", "/inc/dates.rpgleinc", 5, "procedure", "FormatDate"),
        ("/src/orders.rpgle", "/INC/DATES.RPGLEINC", 5, "procedure", "FormatDate"),
        ("/src/orders.rpgle", "/src/orders.rpgle", 7, "constant", "MAX_ORDERS"),
        ("/src/orders.rpgle", "/src/orders.rpgle", 9, "procedure", "CloseOrder"),
    ]


def test_symbol_rows_carry_documentation_and_parameters(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)

    out_dir = tmp_path / "artifacts"
    generate_all_artifacts(root=repo_root, out_dir=out_dir)
    symbols = _load_jsonl(out_dir / SYMBOLS_JSONL)

    by_key = {(r["document"], r["name"]): r for r in symbols}

    constant = by_key[("/src/orders.rpgle", "MAX_ORDERS")]
    assert constant["title"] == "Order limit"
    assert constant["description"] == "Highest order number accepted"
    assert constant["keywords"] == ["500"]

    close_order = by_key[("/src/orders.rpgle", "CloseOrder")]
    assert close_order["keywords"] == ["ind"]
    assert close_order["parameters"] == [
        {"name": "orderId", "keywords": ["int(10)", "const"], "description": ""}
    ]

    format_date = by_key[("/src/orders.rpgle", "FormatDate")]
    assert format_date["keywords"] == ["varchar(10)", "extproc('FMTDATE')"]
    assert format_date["tags"] == {"param": ["value date to format"]}
    assert format_date["parameters"][0]["description"] == "date to format"


def test_generate_respects_configured_excludes(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)

    out_dir = tmp_path / "artifacts"
    config = RpgleMapConfig(exclude=["inc/*"])
    result = generate_all_artifacts(root=repo_root, out_dir=out_dir, config=config)

    assert result["document_count"] == 1
    documents = {r["document"] for r in _load_jsonl(out_dir / SYMBOLS_JSONL)}
    assert documents == {"/src/orders.rpgle"}


def test_generate_is_deterministic(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)

    first_dir = tmp_path / "first"
    second_dir = tmp_path / "second"
    generate_all_artifacts(root=repo_root, out_dir=first_dir)
    generate_all_artifacts(root=repo_root, out_dir=second_dir)

    assert (first_dir / SYMBOLS_JSONL).read_bytes() == (
        second_dir / SYMBOLS_JSONL
    ).read_bytes()
