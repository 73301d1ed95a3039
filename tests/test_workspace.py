"""Tests for the artifact workspace (infra/workspace.py).

Coverage:
* Directory creation.
* Run-token uniqueness, including under concurrent callers.
* Output template and display names.
* Prefix lookup, exact-name preference, in-flight files ignored.
* Purge isolation between tokens and error tolerance.
"""

from __future__ import annotations

import threading
from pathlib import Path
from unittest.mock import patch

from yt_relay.infra.workspace import ArtifactWorkspace


class TestConstruction:
    def test_creates_missing_directory(self, tmp_path: Path) -> None:
        root = tmp_path / "a" / "b"
        ArtifactWorkspace(root)
        assert root.is_dir()

    def test_existing_directory_is_reused(self, tmp_path: Path) -> None:
        (tmp_path / "keep.txt").write_text("x")
        ws = ArtifactWorkspace(tmp_path)
        assert ws.root == tmp_path
        assert (tmp_path / "keep.txt").exists()


class TestRunTokens:
    def test_token_shape(self, workspace: ArtifactWorkspace) -> None:
        prefix, stamp, suffix = workspace.new_run_token().split("_")
        assert prefix == "audio"
        assert stamp.isdigit()
        assert len(suffix) == 12

    def test_tokens_unique_with_frozen_clock(self, workspace: ArtifactWorkspace) -> None:
        with patch("yt_relay.infra.workspace.time.time_ns", return_value=1_700_000_000):
            tokens = {workspace.new_run_token() for _ in range(500)}
        assert len(tokens) == 500

    def test_tokens_unique_across_threads(self, workspace: ArtifactWorkspace) -> None:
        tokens: list[str] = []
        lock = threading.Lock()
        barrier = threading.Barrier(16)

        def worker() -> None:
            barrier.wait()
            batch = [workspace.new_run_token() for _ in range(50)]
            with lock:
                tokens.extend(batch)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(tokens) == 800
        assert len(set(tokens)) == 800

    def test_no_token_is_prefix_of_another(self, workspace: ArtifactWorkspace) -> None:
        tokens = [workspace.new_run_token() for _ in range(200)]
        for a in tokens:
            assert not any(b != a and b.startswith(a) for b in tokens)


class TestTemplates:
    def test_output_pattern(self, workspace: ArtifactWorkspace) -> None:
        assert workspace.output_pattern("tok") == str(workspace.root / "tok.%(ext)s")

    def test_display_name_drops_token(self, workspace: ArtifactWorkspace) -> None:
        path = workspace.root / "audio_1700000000_abcdef123456.mp3"
        assert workspace.display_name(path) == "audio.mp3"

    def test_custom_prefix(self, tmp_path: Path) -> None:
        ws = ArtifactWorkspace(tmp_path, prefix="track")
        assert ws.new_run_token().startswith("track_")
        assert ws.display_name(tmp_path / "x.m4a") == "track.m4a"


class TestLookup:
    def test_exact_name_preferred(self, workspace: ArtifactWorkspace) -> None:
        (workspace.root / "tok.f140.mp3").write_bytes(b"1")
        (workspace.root / "tok.mp3").write_bytes(b"2")
        assert workspace.find_by_prefix("tok", ".mp3") == workspace.root / "tok.mp3"

    def test_prefix_match_when_renamed(self, workspace: ArtifactWorkspace) -> None:
        (workspace.root / "tok.f140.mp3").write_bytes(b"1")
        assert workspace.find_by_prefix("tok", ".mp3") == workspace.root / "tok.f140.mp3"

    def test_other_tokens_not_matched(self, workspace: ArtifactWorkspace) -> None:
        (workspace.root / "other.mp3").write_bytes(b"1")
        assert workspace.find_by_prefix("tok", ".mp3") is None

    def test_wrong_suffix_not_matched(self, workspace: ArtifactWorkspace) -> None:
        (workspace.root / "tok.webm").write_bytes(b"1")
        assert workspace.find_by_prefix("tok", ".mp3") is None

    def test_in_flight_files_ignored(self, workspace: ArtifactWorkspace) -> None:
        (workspace.root / "tok.mp3.part").write_bytes(b"1")
        assert workspace.find_by_prefix("tok", ".part") is None

    def test_entries_sorted_and_scoped(self, workspace: ArtifactWorkspace) -> None:
        for name in ("tok.webm", "tok.mp3", "zzz.mp3"):
            (workspace.root / name).write_bytes(b"")
        assert [p.name for p in workspace.entries("tok")] == ["tok.mp3", "tok.webm"]


class TestPurge:
    def test_removes_only_matching_token(self, workspace: ArtifactWorkspace) -> None:
        for name in ("tok.webm.part", "tok.mp3", "keep.mp3"):
            (workspace.root / name).write_bytes(b"")
        workspace.purge("tok")
        assert [p.name for p in workspace.root.iterdir()] == ["keep.mp3"]

    def test_purge_without_files_is_noop(self, workspace: ArtifactWorkspace) -> None:
        workspace.purge("nothing")
        assert list(workspace.root.iterdir()) == []

    def test_unlink_errors_are_swallowed(self, workspace: ArtifactWorkspace) -> None:
        (workspace.root / "tok.mp3").write_bytes(b"")
        with patch("pathlib.Path.unlink", side_effect=PermissionError("denied")):
            workspace.purge("tok")
        assert (workspace.root / "tok.mp3").exists()

    def test_missing_root_is_tolerated(self, tmp_path: Path) -> None:
        ws = ArtifactWorkspace(tmp_path / "gone")
        (tmp_path / "gone").rmdir()
        ws.purge("tok")
        assert ws.entries("tok") == []
