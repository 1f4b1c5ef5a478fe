"""Tests for glob matching and workspace file enumeration."""

from __future__ import annotations

from pathlib import Path

import pytest

from routeplane.index._internal.discovery import (
    HARDCODED_DIRS,
    FilePatternMatcher,
    enumerate_files,
    matches_glob,
)

INCLUDE = ["**/*.controller.ts"]
EXCLUDE = ["**/node_modules/**", "**/dist/**"]


class TestMatchesGlob:
    """matches_glob() tests."""

    @pytest.mark.parametrize(
        ("path", "pattern", "expected"),
        [
            ("cats.controller.ts", "**/*.controller.ts", True),
            ("src/cats/cats.controller.ts", "**/*.controller.ts", True),
            ("src/cats/cats.service.ts", "**/*.controller.ts", False),
            ("node_modules/", "**/node_modules/**", True),
            ("a/node_modules/x.ts", "**/node_modules/**", True),
            ("src/app.ts", "src/*.ts", True),
            ("src/deep/nested/app.ts", "src/*.ts", False),
            ("src/cats.controller.ts", "src/**/*.controller.ts", True),
            ("src/a/b/cats.controller.ts", "src/**/*.controller.ts", True),
            ("lib/cats.controller.ts", "src/**/*.controller.ts", False),
            ("src/ab.ts", "src/a?.ts", True),
            ("src/a/b.ts", "src/a?b.ts", False),
            ("dist/", "**/dist/**", True),
            ("src/", "src/*", False),
        ],
    )
    def test_patterns(self, path: str, pattern: str, expected: bool) -> None:
        assert matches_glob(path, pattern) is expected


class TestEnumerateFiles:
    """enumerate_files() tests."""

    def test_finds_controllers_and_skips_excluded(self, workspace: Path) -> None:
        files = enumerate_files(workspace, INCLUDE, EXCLUDE)

        assert [f.relative_to(workspace).as_posix() for f in files] == [
            "src/cats/cats.controller.ts",
            "src/dogs/dogs.controller.ts",
        ]

    def test_empty_include_matches_nothing(self, workspace: Path) -> None:
        assert enumerate_files(workspace, [], EXCLUDE) == []

    def test_missing_root(self, tmp_path: Path) -> None:
        assert enumerate_files(tmp_path / "missing", INCLUDE, EXCLUDE) == []

    def test_without_excludes_includes_dependencies(self, workspace: Path) -> None:
        files = enumerate_files(workspace, INCLUDE, [])
        assert workspace / "node_modules" / "lib" / "vendor.controller.ts" in files

    def test_include_glob_order_and_dedup(self, workspace: Path) -> None:
        """Files follow include-glob order; duplicates keep first position."""
        files = enumerate_files(
            workspace,
            ["src/dogs/*.ts", "**/*.controller.ts"],
            EXCLUDE,
        )

        assert [f.name for f in files] == ["dogs.controller.ts", "cats.controller.ts"]

    def test_hardcoded_dirs_never_walked(self, workspace: Path) -> None:
        git_dir = workspace / ".git"
        git_dir.mkdir()
        (git_dir / "stale.controller.ts").write_text("")

        files = enumerate_files(workspace, INCLUDE, [])

        assert all(".git" not in f.parts for f in files)
        assert ".git" in HARDCODED_DIRS


class TestFilePatternMatcher:
    """Eligibility checks for change events."""

    @pytest.fixture
    def matcher(self, workspace: Path) -> FilePatternMatcher:
        return FilePatternMatcher([workspace], INCLUDE, EXCLUDE)

    def test_controller_is_eligible(self, matcher: FilePatternMatcher, workspace: Path) -> None:
        assert matcher.is_eligible(workspace / "src" / "new.controller.ts")

    def test_non_matching_file(self, matcher: FilePatternMatcher, workspace: Path) -> None:
        assert not matcher.is_eligible(workspace / "src" / "cats" / "cats.service.ts")

    def test_excluded_file(self, matcher: FilePatternMatcher, workspace: Path) -> None:
        assert not matcher.is_eligible(workspace / "node_modules" / "lib" / "vendor.controller.ts")

    def test_outside_roots(self, matcher: FilePatternMatcher, tmp_path: Path) -> None:
        assert not matcher.is_eligible(tmp_path / "elsewhere.controller.ts")

    def test_single_star_stays_in_directory(self, workspace: Path) -> None:
        matcher = FilePatternMatcher([workspace], ["src/*.controller.ts"], [])

        assert matcher.is_eligible(workspace / "src" / "birds.controller.ts")
        assert not matcher.is_eligible(workspace / "src" / "cats" / "cats.controller.ts")

    def test_double_star_matches_zero_directories(self, workspace: Path) -> None:
        matcher = FilePatternMatcher([workspace], ["src/**/*.controller.ts"], [])
        assert matcher.is_eligible(workspace / "src" / "birds.controller.ts")
