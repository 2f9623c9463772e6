"""Tests for unified diff parsing."""

from __future__ import annotations

from reviewplane.diff.parser import parse_git_diff, parse_patch

MODIFIED_DIFF = """\
diff --git a/src/app.py b/src/app.py
index 3b18e51..a9c2f0d 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,3 @@
 line1
-line2
+LINE2
 line3
"""

NEW_FILE_DIFF = """\
diff --git a/notes.txt b/notes.txt
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/notes.txt
@@ -0,0 +1,2 @@
+first
+second
"""

LOCK_DIFF = """\
diff --git a/package-lock.json b/package-lock.json
index 1111111..2222222 100644
--- a/package-lock.json
+++ b/package-lock.json
@@ -1 +1 @@
-{}
+{"a": 1}
"""


class TestParsePatch:
    """Single-file patch parsing."""

    def test_replacement_anchors_deletion_on_new_line(self) -> None:
        hunks = parse_patch("@@ -1,3 +1,3 @@\n line1\n-line2\n+LINE2\n line3\n")

        assert len(hunks) == 1
        hunk = hunks[0]
        assert hunk.kind == "change"
        assert hunk.added_lines == (2,)
        assert [(e.content, e.anchor, e.old_line) for e in hunk.deleted_entries] == [
            ("line2", 2, 2)
        ]

    def test_deletion_at_end_anchors_past_last_line(self) -> None:
        """Deleting the last line anchors one past the new file's end."""
        hunks = parse_patch("@@ -1,3 +1,2 @@\n a\n b\n-c\n")

        assert hunks[0].kind == "delete"
        assert hunks[0].deleted_entries[0].anchor == 3
        assert hunks[0].deleted_entries[0].old_line == 3

    def test_pure_addition(self) -> None:
        hunks = parse_patch("@@ -0,0 +1,2 @@\n+x\n+y\n")

        assert hunks[0].kind == "add"
        assert hunks[0].added_lines == (1, 2)
        assert hunks[0].line_count == 2

    def test_context_between_changes_records_break(self) -> None:
        """A deletion and an addition separated by context stay apart."""
        hunks = parse_patch("@@ -1,4 +1,4 @@\n a\n-b\n c\n+d\n")

        assert hunks[0].deleted_entries[0].anchor == 2
        assert hunks[0].added_lines == (3,)
        assert 3 in hunks[0].context_breaks

    def test_no_newline_marker_ignored(self) -> None:
        hunks = parse_patch("@@ -1 +1 @@\n-old\n\\ No newline at end of file\n+new\n")

        assert hunks[0].added_lines == (1,)
        assert len(hunks[0].deleted_entries) == 1

    def test_context_only_hunk_dropped(self) -> None:
        assert parse_patch("@@ -1,2 +1,2 @@\n a\n b\n") == []

    def test_multiple_hunks(self) -> None:
        patch = "@@ -1,2 +1,2 @@\n-a\n+A\n b\n@@ -10,2 +10,3 @@\n x\n+y\n z\n"

        hunks = parse_patch(patch)

        assert [h.start_line for h in hunks] == [1, 10]
        assert hunks[1].added_lines == (11,)


class TestParseGitDiff:
    """Multi-file diff parsing."""

    def test_modified_file(self) -> None:
        files = parse_git_diff(MODIFIED_DIFF)

        assert len(files) == 1
        review_file = files[0]
        assert review_file.path == "src/app.py"
        assert review_file.status == "modified"
        assert (review_file.additions, review_file.deletions) == (1, 1)
        assert len(review_file.change_blocks) == 1
        assert review_file.change_blocks[0].kind == "change"

    def test_new_file_status(self) -> None:
        files = parse_git_diff(NEW_FILE_DIFF)

        assert files[0].status == "added"
        assert files[0].change_blocks[0].added_lines == (1, 2)

    def test_multiple_files_in_order(self) -> None:
        files = parse_git_diff(MODIFIED_DIFF + NEW_FILE_DIFF)

        assert [f.path for f in files] == ["src/app.py", "notes.txt"]

    def test_noise_files_skipped_by_basename(self) -> None:
        files = parse_git_diff(MODIFIED_DIFF + LOCK_DIFF, skip_files={"package-lock.json"})

        assert [f.path for f in files] == ["src/app.py"]

    def test_mode_only_change_dropped(self) -> None:
        diff = "diff --git a/run.sh b/run.sh\nold mode 100644\nnew mode 100755\n"

        assert parse_git_diff(diff) == []

    def test_rename_status(self) -> None:
        diff = (
            "diff --git a/old.py b/new.py\n"
            "similarity index 90%\n"
            "rename from old.py\n"
            "rename to new.py\n"
            "--- a/old.py\n"
            "+++ b/new.py\n"
            "@@ -1 +1 @@\n"
            "-x = 1\n"
            "+x = 2\n"
        )

        files = parse_git_diff(diff)

        assert files[0].path == "new.py"
        assert files[0].status == "renamed"
