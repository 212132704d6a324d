from __future__ import annotations

import logging

import pytest

from cache.content import ContentCache, FetchError
from cache.symbols import SymbolModelCache
from models.declarations import SymbolModel
from resolve.paths import DocumentContext, ResolvedPath, UnresolvableIncludeError

MEMBER_DOC = DocumentContext(scheme="member", path="/DEVLIB/QRPGLESRC/PGM.rpgle")
STREAM_DOC = DocumentContext(scheme="streamfile", path="/home/dev/pgm.rpgle")


class _FakeSource:
    def __init__(
        self,
        members: dict[tuple[str | None, str, str, str], str] | None = None,
        streams: dict[str, str] | None = None,
    ) -> None:
        self.members = members or {}
        self.streams = streams or {}
        self.calls: list[object] = []

    def fetch_member_content(
        self, storage_group: str | None, library: str, source_file: str, member: str
    ) -> str:
        key = (storage_group, library, source_file, member)
        self.calls.append(key)
        if key not in self.members:
            raise FetchError(f"member not found: {key}")
        return self.members[key]

    def fetch_stream_content(self, path: str) -> str:
        self.calls.append(path)
        if path not in self.streams:
            raise FetchError(f"stream file not found: {path}")
        return self.streams[path]


def test_member_content_is_fetched_once_and_cached() -> None:
    source = _FakeSource(
        members={(None, "DEVLIB", "QRPGLEREF", "UTILS"): "**FREE\r\ndcl-c A 1;"}
    )
    cache = ContentCache(source)

    first = cache.fetch(MEMBER_DOC, "qrpgleref,utils")
    second = cache.fetch(MEMBER_DOC, "QRPGLEREF,UTILS.rpgleinc")

    assert first == ("**FREE", "dcl-c A 1;")
    assert second == first
    assert source.calls == [(None, "DEVLIB", "QRPGLEREF", "UTILS")]
    assert "/DEVLIB/QRPGLEREF/UTILS" in cache


def test_stream_content_uses_canonical_path() -> None:
    source = _FakeSource(streams={"/HOME/DEV/INC/UTILS.RPGLEINC": "a\nb\n"})
    cache = ContentCache(source, home_directory="/home/dev")

    canonical, lines = cache.fetch_resolved(STREAM_DOC, "'inc/utils.rpgleinc'")

    assert canonical == "/HOME/DEV/INC/UTILS.RPGLEINC"
    assert lines == ("a", "b", "")


def test_fetch_failure_yields_no_lines_and_is_not_cached(
    caplog: pytest.LogCaptureFixture,
) -> None:
    source = _FakeSource()
    cache = ContentCache(source)

    with caplog.at_level(logging.WARNING, logger="cache.content"):
        canonical, lines = cache.fetch_resolved(MEMBER_DOC, "MISSING")

    assert canonical == "/DEVLIB/QRPGLESRC/MISSING"
    assert lines == ()
    assert canonical not in cache
    assert "Failed to fetch" in caplog.text

    cache.fetch(MEMBER_DOC, "MISSING")
    assert len(source.calls) == 2


def test_unexpected_source_errors_are_contained() -> None:
    class _Broken:
        def fetch_member_content(self, *args: object) -> str:
            raise ConnectionError("connection reset")

        def fetch_stream_content(self, path: str) -> str:
            raise ConnectionError("connection reset")

    cache = ContentCache(_Broken())

    assert cache.fetch(MEMBER_DOC, "UTILS") == ()


def test_unresolvable_target_yields_no_lines() -> None:
    source = _FakeSource()
    cache = ContentCache(source)
    document = DocumentContext(scheme="member", path="/PGM.rpgle")

    canonical, lines = cache.fetch_resolved(document, "UTILS")

    assert canonical is None
    assert lines == ()
    assert source.calls == []


def test_member_without_address_is_not_downloaded() -> None:
    source = _FakeSource()
    cache = ContentCache(source)
    resolved = ResolvedPath(canonical_path="/DEVLIB/QRPGLEREF/UTILS", kind="member")

    with pytest.raises(UnresolvableIncludeError, match="Member address missing"):
        cache._download(resolved)
    assert source.calls == []


def test_refresh_replaces_tracked_entry_only() -> None:
    source = _FakeSource(members={(None, "DEVLIB", "QRPGLEREF", "UTILS"): "old"})
    cache = ContentCache(source)
    cache.fetch(MEMBER_DOC, "qrpgleref,utils")

    saved = DocumentContext(scheme="member", path="/DEVLIB/QRPGLEREF/UTILS.rpgleinc")
    assert cache.refresh(saved, "new\r\ntext")
    assert cache.get("/DEVLIB/QRPGLEREF/UTILS") == ("new", "text")

    untracked = DocumentContext(scheme="member", path="/DEVLIB/QRPGLEREF/OTHER.rpgle")
    assert not cache.refresh(untracked, "ignored")
    assert "/DEVLIB/QRPGLEREF/OTHER" not in cache


def test_refresh_of_stream_file_uses_upper_cased_path() -> None:
    cache = ContentCache(_FakeSource())
    cache.put("/HOME/DEV/INC/UTILS.RPGLEINC", ["old"])

    saved = DocumentContext(scheme="streamfile", path="/home/dev/inc/utils.rpgleinc")

    assert cache.refresh(saved, "new")
    assert cache.get("/HOME/DEV/INC/UTILS.RPGLEINC") == ("new",)


def test_symbol_model_cache_invalidate() -> None:
    cache = SymbolModelCache()
    model = SymbolModel()

    cache.put(STREAM_DOC, model)
    assert STREAM_DOC in cache
    assert cache.get(STREAM_DOC) is model

    assert cache.invalidate(STREAM_DOC)
    assert not cache.invalidate(STREAM_DOC)
    assert cache.get(STREAM_DOC) is None
