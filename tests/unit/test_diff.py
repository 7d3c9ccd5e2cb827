"""Unit tests for unified diff parsing (parse_unified_diff, index_by_path)."""

from __future__ import annotations

from intern_daily.analysis.diff import index_by_path, parse_unified_diff


SIMPLE_DIFF = """commit 0123456789abcdef0123456789abcdef01234567
Author: Dev <dev@example.com>

    feat: add chat endpoint

diff --git a/app/api/chat/route.ts b/app/api/chat/route.ts
index 1111111..2222222 100644
--- a/app/api/chat/route.ts
+++ b/app/api/chat/route.ts
@@ -1,0 +2,2 @@
+const res = await fetch(url);
+return res;
@@ -10 +11,0 @@
-// old comment
diff --git a/styles/globals.css b/styles/globals.css
--- a/styles/globals.css
+++ b/styles/globals.css
@@ -3 +3 @@
-  padding: 4px;
+  padding: 8px;
"""


def test_parse_empty_text_returns_empty() -> None:
    assert parse_unified_diff("") == []


def test_parse_two_files_with_markers_stripped() -> None:
    result = parse_unified_diff(SIMPLE_DIFF)
    assert [d.path for d in result] == ["app/api/chat/route.ts", "styles/globals.css"]
    route, css = result
    assert route.added == ["const res = await fetch(url);", "return res;"]
    assert route.removed == ["// old comment"]
    assert css.added == ["  padding: 8px;"]
    assert css.removed == ["  padding: 4px;"]


def test_lines_before_first_header_are_ignored() -> None:
    """Commit header and message lines (even ones starting with +/-) are not content."""
    text = "+not content\n-also not\ndiff --git a/x.ts b/x.ts\n+real\n"
    result = parse_unified_diff(text)
    assert len(result) == 1
    assert result[0].added == ["real"]
    assert result[0].removed == []


def test_plus_plus_plus_overrides_header_path() -> None:
    text = "diff --git a/old/name.ts b/old/name.ts\n--- a/old/name.ts\n+++ b/new/name.ts\n+x\n"
    (entry,) = parse_unified_diff(text)
    assert entry.path == "new/name.ts"


def test_plus_plus_plus_without_b_prefix_is_used_verbatim() -> None:
    text = "diff --git a/a.ts b/a.ts\n+++ renamed.ts\n"
    (entry,) = parse_unified_diff(text)
    assert entry.path == "renamed.ts"


def test_deletion_keeps_header_path() -> None:
    """+++ /dev/null does not override; the file stays tracked under its header path."""
    text = (
        "diff --git a/lib/gone.ts b/lib/gone.ts\n"
        "deleted file mode 100644\n"
        "--- a/lib/gone.ts\n"
        "+++ /dev/null\n"
        "@@ -1,2 +0,0 @@\n"
        "-export const a = 1;\n"
        "-export const b = 2;\n"
    )
    (entry,) = parse_unified_diff(text)
    assert entry.path == "lib/gone.ts"
    assert entry.removed == ["export const a = 1;", "export const b = 2;"]
    assert entry.added == []


def test_malformed_header_drops_lines_until_next_valid_header() -> None:
    text = (
        "diff --git garbage\n"
        "+lost\n"
        "-lost too\n"
        "diff --git a/ok.ts b/ok.ts\n"
        "+kept\n"
    )
    result = parse_unified_diff(text)
    assert [d.path for d in result] == ["ok.ts"]
    assert result[0].added == ["kept"]


def test_same_path_twice_yields_two_entries() -> None:
    text = "diff --git a/a.ts b/a.ts\n+one\ndiff --git a/a.ts b/a.ts\n+two\n"
    result = parse_unified_diff(text)
    assert len(result) == 2
    assert result[0].added == ["one"]
    assert result[1].added == ["two"]
    # Index keeps the later block.
    assert index_by_path(result)["a.ts"].added == ["two"]


def test_crlf_line_endings() -> None:
    text = "diff --git a/a.ts b/a.ts\r\n+++ b/a.ts\r\n+x\r\n-y\r\n"
    (entry,) = parse_unified_diff(text)
    assert entry.added == ["x"]
    assert entry.removed == ["y"]


def test_entry_count_never_exceeds_header_count() -> None:
    text = SIMPLE_DIFF + "diff --git broken\n+x\n"
    headers = sum(1 for line in text.splitlines() if line.startswith("diff --git"))
    result = parse_unified_diff(text)
    assert len(result) <= headers
    assert len(result) == 2
