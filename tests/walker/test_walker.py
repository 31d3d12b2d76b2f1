#!/usr/bin/env python3
"""Tests for the directory Walker."""

import os

import pytest

from filefind.core.constants import ErrorCode, FileFindError
from filefind.core.validators import ValidationError
from filefind.rules.patterns import Pattern
from filefind.walker.walker import Walker, WalkError

ALL_ENTRIES = {
    "README.md",
    "setup.py",
    "report.pdf.bak",
    "src",
    "main.py",
    "util",
    "helpers.py",
    "docs",
    "api.md",
}


def names(records):
    return [r.name for r in records]


class TestEnumerate:
    """Tests for Walker.enumerate."""

    def test_returns_every_descendant_once(self, source_dir):
        """One record per entry below the root, root excluded."""
        records = Walker(str(source_dir)).enumerate()

        assert len(records) == len(ALL_ENTRIES)
        assert set(names(records)) == ALL_ENTRIES

    def test_root_not_emitted(self, source_dir):
        """The starting directory never appears in the result."""
        records = Walker(str(source_dir)).enumerate()
        assert str(source_dir) not in [r.path for r in records]

    def test_paths_join_root_and_names(self, source_dir, source_paths):
        """Paths are built by joining parent path and entry name."""
        records = Walker(str(source_dir)).enumerate()
        assert {r.path for r in records} == set(source_paths.values())

    def test_relative_root(self, source_dir, monkeypatch):
        """A relative root yields relative paths."""
        monkeypatch.chdir(source_dir)
        records = Walker(".").enumerate()
        assert os.path.join(".", "src", "main.py") in [r.path for r in records]

    def test_empty_directory(self, temp_dir):
        """An empty root yields no records."""
        (temp_dir / "empty").mkdir()
        assert Walker(str(temp_dir / "empty")).enumerate() == []

    def test_accepts_path_objects(self, source_dir):
        """os.PathLike roots are accepted."""
        walker = Walker(source_dir)
        assert walker.root == str(source_dir)
        assert len(walker.enumerate()) == len(ALL_ENTRIES)

    def test_record_attributes(self, source_dir, source_paths):
        """Records carry stat metadata."""
        records = {r.name: r for r in Walker(str(source_dir)).enumerate()}
        st = os.stat(source_paths["setup.py"])

        setup = records["setup.py"]
        assert setup.path == source_paths["setup.py"]
        assert not setup.is_dir
        assert setup.uid == st.st_uid
        assert setup.gid == st.st_gid
        assert setup.perms == st.st_mode & 0o7777

        assert records["src"].is_dir

    def test_permission_bits(self, temp_dir):
        """Only the lower 12 bits of the mode are kept."""
        target = temp_dir / "script.sh"
        target.write_text("#!/bin/sh\n")
        os.chmod(target, 0o2750)

        (record,) = Walker(str(temp_dir)).enumerate()
        assert record.perms == 0o2750


class TestTraversalOrder:
    """Tests for pre-order and post-order emission."""

    def test_pre_order_single_file(self, temp_dir):
        """Pre-order: directory then its file."""
        (temp_dir / "D").mkdir()
        (temp_dir / "D" / "F").write_text("")

        assert names(Walker(str(temp_dir)).enumerate()) == ["D", "F"]

    def test_post_order_single_file(self, temp_dir):
        """Post-order: file then its directory."""
        (temp_dir / "D").mkdir()
        (temp_dir / "D" / "F").write_text("")

        assert names(Walker(str(temp_dir), depth_first=True).enumerate()) == ["F", "D"]

    def test_nested_chain(self, temp_dir):
        """A chain of directories is fully ordered in both modes."""
        (temp_dir / "a" / "b" / "c").mkdir(parents=True)
        (temp_dir / "a" / "b" / "c" / "leaf").write_text("")

        assert names(Walker(str(temp_dir)).enumerate()) == ["a", "b", "c", "leaf"]
        assert names(Walker(str(temp_dir), depth_first=True).enumerate()) == [
            "leaf",
            "c",
            "b",
            "a",
        ]

    def test_pre_order_parents_first(self, source_dir):
        """Every directory precedes all of its descendants."""
        records = Walker(str(source_dir)).enumerate()
        index = {r.path: i for i, r in enumerate(records)}

        for r in records:
            parent = os.path.dirname(r.path)
            if parent in index:
                assert index[parent] < index[r.path]

    def test_post_order_parents_last(self, source_dir):
        """Every directory follows all of its descendants."""
        records = Walker(str(source_dir), depth_first=True).enumerate()
        index = {r.path: i for i, r in enumerate(records)}

        for r in records:
            parent = os.path.dirname(r.path)
            if parent in index:
                assert index[parent] > index[r.path]

    def test_subtrees_are_contiguous(self, source_dir, source_paths):
        """A subtree is emitted without interleaving other entries."""
        records = [r.path for r in Walker(str(source_dir)).enumerate()]
        start = records.index(source_paths["src"])
        assert set(records[start:start + 4]) == {
            source_paths["src"],
            source_paths["main.py"],
            source_paths["util"],
            source_paths["helpers.py"],
        }

    def test_same_records_in_both_modes(self, source_dir):
        """Traversal mode changes order, not content."""
        pre = Walker(str(source_dir)).enumerate()
        post = Walker(str(source_dir), depth_first=True).enumerate()
        assert sorted(r.path for r in pre) == sorted(r.path for r in post)

    def test_deep_tree(self, temp_dir):
        """A long chain of nested directories is walked completely."""
        depth = 200
        current = temp_dir
        for _ in range(depth):
            current = current / "d"
            current.mkdir()

        records = Walker(str(temp_dir)).enumerate()
        assert len(records) == depth
        assert records[-1].path == str(current)

        post = Walker(str(temp_dir), depth_first=True).enumerate()
        assert post[0].path == str(current)


class TestMaxDepth:
    """Tests for depth limiting."""

    def test_max_depth_zero_returns_nothing(self, source_dir):
        """Depth 0 visits no descendants."""
        assert Walker(str(source_dir), max_depth=0).enumerate() == []

    def test_max_depth_one(self, source_dir):
        """Depth 1 lists only the root's children."""
        records = Walker(str(source_dir), max_depth=1).enumerate()
        assert set(names(records)) == {"README.md", "setup.py", "report.pdf.bak", "src", "docs"}

    def test_max_depth_two(self, source_dir):
        """Depth 2 stops above src/util's contents."""
        records = Walker(str(source_dir), max_depth=2).enumerate()
        assert set(names(records)) == ALL_ENTRIES - {"helpers.py"}

    def test_boundary_directory_still_emitted(self, temp_dir):
        """A directory at the limit is emitted but not entered."""
        (temp_dir / "D").mkdir()
        (temp_dir / "D" / "F").write_text("")

        assert names(Walker(str(temp_dir), max_depth=1).enumerate()) == ["D"]
        assert names(Walker(str(temp_dir), max_depth=1, depth_first=True).enumerate()) == ["D"]

    def test_large_max_depth_is_unlimited(self, source_dir):
        """A limit deeper than the tree changes nothing."""
        records = Walker(str(source_dir), max_depth=50).enumerate()
        assert len(records) == len(ALL_ENTRIES)

    def test_negative_max_depth_rejected(self, source_dir):
        """Negative limits are a validation error."""
        with pytest.raises(ValidationError):
            Walker(str(source_dir), max_depth=-1)

    def test_max_depth_zero_still_lists_root(self, temp_dir):
        """Depth 0 on a missing root still fails."""
        with pytest.raises(WalkError):
            Walker(str(temp_dir / "missing"), max_depth=0).enumerate()


class TestWalkErrors:
    """Tests for fail-fast error handling."""

    def test_missing_root(self, temp_dir):
        """A root that does not exist raises WalkError."""
        root = str(temp_dir / "missing")
        with pytest.raises(WalkError) as exc_info:
            Walker(root).enumerate()

        assert exc_info.value.path == root
        assert exc_info.value.error_code == ErrorCode.NOT_FOUND
        assert root in str(exc_info.value)

    def test_root_is_a_file(self, temp_dir):
        """A regular file cannot be listed."""
        target = temp_dir / "file.txt"
        target.write_text("")

        with pytest.raises(WalkError) as exc_info:
            Walker(str(target)).enumerate()
        assert exc_info.value.error_code == ErrorCode.IO_ERROR

    def test_walk_error_is_filefind_error(self, temp_dir):
        """WalkError belongs to the project error hierarchy."""
        with pytest.raises(FileFindError):
            Walker(str(temp_dir / "missing")).enumerate()

    def test_stat_failure_aborts_walk(self, source_dir, source_paths):
        """A single failing stat aborts the whole enumeration."""

        def failing_stat(path):
            if path == source_paths["helpers.py"]:
                raise PermissionError(13, "Permission denied", path)
            return os.stat(path)

        with pytest.raises(WalkError) as exc_info:
            Walker(str(source_dir), stat_func=failing_stat).enumerate()

        assert exc_info.value.path == source_paths["helpers.py"]
        assert exc_info.value.reason == "Permission denied"
        assert exc_info.value.error_code == ErrorCode.PERMISSION_DENIED

    def test_unreadable_subdirectory_aborts_walk(self, source_dir, source_paths, monkeypatch):
        """Listing failure in any subdirectory is fatal, no partial result."""
        real_scandir = os.scandir

        def guarded_scandir(path):
            if path == source_paths["util"]:
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", guarded_scandir)

        with pytest.raises(WalkError) as exc_info:
            Walker(str(source_dir)).enumerate()
        assert exc_info.value.path == source_paths["util"]

    def test_broken_symlink_aborts_walk(self, temp_dir):
        """Entries whose metadata cannot be resolved are fatal."""
        (temp_dir / "dangling").symlink_to(temp_dir / "nowhere")

        with pytest.raises(WalkError) as exc_info:
            Walker(str(temp_dir)).enumerate()
        assert exc_info.value.error_code == ErrorCode.NOT_FOUND

    def test_non_utf8_name_aborts_walk(self, temp_dir):
        """A name that is not valid UTF-8 cannot become a record."""
        try:
            fd = os.open(os.path.join(os.fsencode(temp_dir), b"bad\xff"), os.O_CREAT | os.O_WRONLY)
        except OSError:
            pytest.skip("filesystem rejects non-UTF-8 names")
        os.close(fd)

        with pytest.raises(WalkError) as exc_info:
            Walker(str(temp_dir)).enumerate()
        assert exc_info.value.error_code == ErrorCode.ENCODING_ERROR


class TestSymlinks:
    """Symlinks are followed like stat does."""

    def test_symlink_to_directory_is_descended(self, temp_dir):
        """A link to a directory is reported as a directory and entered."""
        (temp_dir / "real").mkdir()
        (temp_dir / "real" / "inside").write_text("")
        (temp_dir / "link").symlink_to(temp_dir / "real", target_is_directory=True)

        records = Walker(str(temp_dir)).enumerate()
        by_path = {r.path: r for r in records}

        link = str(temp_dir / "link")
        assert by_path[link].is_dir
        assert os.path.join(link, "inside") in by_path


class TestMatches:
    """Tests for Walker.matches (enumerate + filter)."""

    def test_no_filters_returns_everything(self, source_dir):
        """Without filters, matches equals enumerate."""
        walker = Walker(str(source_dir))
        assert walker.matches() == walker.enumerate()

    def test_name_and_type(self, source_dir, source_paths):
        """Name pattern and type filter combine."""
        walker = Walker(str(source_dir))
        walker.add_name_patterns([Pattern.compile("*.py")])
        walker.set_file_type("f")

        assert {r.path for r in walker.matches()} == {
            source_paths["setup.py"],
            source_paths["main.py"],
            source_paths["helpers.py"],
        }

    def test_directories_only(self, source_dir):
        """Type d keeps only directories."""
        walker = Walker(str(source_dir))
        walker.set_file_type("d")
        assert set(names(walker.matches())) == {"src", "util", "docs"}

    def test_files_only(self, source_dir):
        """Type f drops every directory."""
        walker = Walker(str(source_dir))
        walker.set_file_type("f")
        assert not any(r.is_dir for r in walker.matches())

    def test_path_pattern(self, source_dir):
        """Path patterns see the full path."""
        walker = Walker(str(source_dir))
        walker.add_path_patterns([Pattern.compile("*src*")])
        assert set(names(walker.matches())) == {"src", "main.py", "util", "helpers.py"}

    def test_repeated_name_patterns_are_anded(self, source_dir):
        """Two name patterns must both match."""
        walker = Walker(str(source_dir))
        walker.add_name_patterns([Pattern.compile("*.pdf*"), Pattern.compile("*bak")])
        assert names(walker.matches()) == ["report.pdf.bak"]

        walker = Walker(str(source_dir))
        walker.add_name_patterns([Pattern.compile("*.pdf"), Pattern.compile("*bak")])
        assert walker.matches() == []

    def test_uid_gid_perms(self, source_dir, source_paths):
        """Owner and permission filters match stat values."""
        target = source_paths["main.py"]
        os.chmod(target, 0o640)
        st = os.stat(target)

        walker = Walker(str(source_dir))
        walker.set_uid(st.st_uid)
        walker.set_gid(st.st_gid)
        walker.set_perms(0o640)

        assert [r.path for r in walker.matches()] == [target]

    def test_filters_keep_traversal_order(self, source_dir):
        """Matches appear in the same order as enumeration."""
        walker = Walker(str(source_dir), depth_first=True)
        walker.set_file_type("f")
        expected = [r for r in walker.enumerate() if not r.is_dir]
        assert walker.matches() == expected

    def test_invalid_type_rejected(self, source_dir):
        """Unknown type characters are rejected when set."""
        walker = Walker(str(source_dir))
        with pytest.raises(ValidationError):
            walker.set_file_type("x")

    def test_config_property(self, source_dir):
        """Filters accumulate on the walker's configuration."""
        walker = Walker(str(source_dir))
        walker.set_uid(0)
        walker.add_name_patterns([Pattern.compile("a")])
        assert walker.config.uid == 0
        assert len(walker.config.name_patterns) == 1
