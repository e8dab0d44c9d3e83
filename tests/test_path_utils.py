"""
Tests for the URL path to clone destination conversion.
"""

import os

import pytest

from goclone import path_utils
from goclone.errors import AbsolutePathError, PathEscapeError, PathTraversalError
from goclone.path_utils import post_trim, pre_trim, sanitize

posix_only = pytest.mark.skipif(os.sep != "/", reason="backslash is a separator on Windows")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("/abc/def", "abc/def"),
        ("/abcdef", "abcdef"),
        ("\\abc\\def", "abc\\def"),
        ("\\abcdef", "abcdef"),
        ("abc", "abc"),
        ("//abc", "/abc"),
        ("", ""),
    ],
)
def test_pre_trim_removes_one_leading_separator(raw, expected):
    assert pre_trim(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("mojotx/git-goclone.git", "mojotx/git-goclone"),
        ("mojotx/git-goclone", "mojotx/git-goclone"),
        ("repo.git", "repo"),
        ("repo.GIT", "repo.GIT"),
        ("a.git/b", "a.git/b"),
        ("repo.gitx", "repo.gitx"),
        ("xgit", "xgit"),
        (".git", ".git"),
        ("a/.git", "a/.git"),
        ("a\\.git", "a\\.git"),
        ("git", "git"),
        ("repo.git.git", "repo.git"),
    ],
)
def test_post_trim_strips_only_a_trailing_suffix(raw, expected):
    assert post_trim(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "/mojotx/git-goclone.git",
        "mojotx/git-goclone.git",
        "/mojotx/git-goclone",
        "mojotx/git-goclone",
    ],
)
def test_sanitize_forward_slashes(workdir, raw):
    assert sanitize(raw) == os.path.join("mojotx", "git-goclone")


@posix_only
@pytest.mark.parametrize(
    "raw",
    [
        "\\mojotx\\git-goclone.git",
        "mojotx\\git-goclone.git",
        "\\mojotx\\git-goclone",
        "mojotx\\git-goclone",
    ],
)
def test_sanitize_backslashes(workdir, raw):
    assert sanitize(raw) == "mojotx\\git-goclone"


@pytest.mark.parametrize("raw", ["", "/", "\\", "//", "///", "."])
def test_empty_paths_sanitize_to_current_directory(workdir, raw):
    assert sanitize(raw) == "."


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("a/../b", "b"),
        ("/a/./b/", os.path.join("a", "b")),
        ("/org//repo.git", os.path.join("org", "repo")),
        ("/a..b/repo", os.path.join("a..b", "repo")),
        ("/my.git.repos/project.git", os.path.join("my.git.repos", "project")),
    ],
)
def test_sanitize_normalizes(workdir, raw, expected):
    assert sanitize(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "../../../etc/passwd",
        "/../../../etc/passwd",
        "a/../../b",
        "/..",
        "..",
        "org/../../repo.git",
    ],
)
def test_sanitize_rejects_traversal(workdir, raw):
    with pytest.raises(PathTraversalError, match="path traversal detected"):
        sanitize(raw)


@posix_only
def test_sanitize_rejects_backslash_traversal(workdir):
    with pytest.raises(PathTraversalError):
        sanitize("..\\..\\etc\\passwd")


def test_doubled_leading_slash_does_not_become_absolute(workdir):
    # normpath keeps "//" as a root on POSIX; it must be stripped again
    result = sanitize("//etc/passwd")

    assert result == os.path.join("etc", "passwd")
    assert not os.path.isabs(result)


def test_sanitize_rejects_absolute_result(workdir, monkeypatch):
    monkeypatch.setattr(path_utils, "_is_absolute", lambda path: True)

    with pytest.raises(AbsolutePathError, match="absolute paths not allowed"):
        sanitize("/org/repo.git")


@pytest.mark.skipif(os.name != "nt", reason="drive letters only exist on Windows")
def test_sanitize_rejects_drive_paths(workdir):
    with pytest.raises(AbsolutePathError):
        sanitize("C:/Windows/System32")


def test_sanitize_rejects_symlink_escape(tmp_path, monkeypatch):
    work = tmp_path / "work"
    outside = tmp_path / "outside"
    work.mkdir()
    outside.mkdir()
    try:
        os.symlink(outside, work / "link", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported here")
    monkeypatch.chdir(work)

    with pytest.raises(PathEscapeError, match="escapes working directory"):
        sanitize("/link/repo.git")


def test_sanitize_allows_symlink_inside_workdir(workdir):
    (workdir / "real").mkdir()
    try:
        os.symlink(workdir / "real", workdir / "alias", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported here")

    assert sanitize("/alias/repo.git") == os.path.join("alias", "repo")


# --- laws ---

SAMPLES = [
    "org/repo",
    "org/repo.git",
    "/org/repo.git",
    "deep/nested/group/project.git",
    "a/./b",
    "a/../b.git",
    "single",
    "",
]


@pytest.mark.parametrize("raw", SAMPLES)
def test_sanitize_is_idempotent(workdir, raw):
    once = sanitize(raw)
    assert sanitize(once) == once


@pytest.mark.parametrize("raw", ["org/repo", "single", "deep/nested/project", "my.git.repos/x"])
def test_appended_suffix_is_stripped(workdir, raw):
    assert sanitize(raw + ".git") == sanitize(raw)


@posix_only
@pytest.mark.parametrize("raw", ["org/repo", "org/repo.git", "single", "a/./b"])
def test_leading_separator_is_ignored(workdir, raw):
    assert sanitize("/" + raw) == sanitize(raw)
    assert sanitize("\\" + raw) == sanitize(raw)


@pytest.mark.skipif(os.name == "nt", reason="the working directory cannot be removed on Windows")
def test_removed_working_directory_is_reported(tmp_path, monkeypatch):
    gone = tmp_path / "gone"
    gone.mkdir()
    monkeypatch.chdir(gone)
    gone.rmdir()

    with pytest.raises(PathEscapeError, match="cannot get working directory"):
        sanitize("/org/repo.git")
