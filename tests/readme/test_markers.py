"""Tests for the managed marker block engine."""

from __future__ import annotations

import pytest

from bdg.readme.markers import (
    BDG_BEGIN,
    BDG_END,
    Document,
    MarkerCountError,
    MarkerOrderError,
    ensure_marker_block,
    extract_managed_block,
    extract_marker_block_lines,
    marker_count,
    readme_newline_info,
    remove_marker_block,
    rewrite_marker_block,
    rewrite_marker_block_lines,
)


@pytest.mark.parametrize(
    "content",
    ["", "\n", "a", "a\n", "a\n\n", "a\r\nb", "a\r\nb\r\n", "\r\n\r\n", "x\r\ny\n"],
)
def test_document_round_trips_exactly(content: str) -> None:
    assert Document.parse(content).render() == content


def test_ensure_inserts_marker_under_h1() -> None:
    assert ensure_marker_block("# Title\nIntro") == (
        "# Title\n<!-- bdg:begin -->\n<!-- bdg:end -->\nIntro"
    )


def test_ensure_inserts_marker_at_top_without_h1() -> None:
    assert ensure_marker_block("Intro\nLine") == (
        "<!-- bdg:begin -->\n<!-- bdg:end -->\nIntro\nLine"
    )


def test_ensure_on_empty_document_yields_marker_only() -> None:
    assert ensure_marker_block("") == "<!-- bdg:begin -->\n<!-- bdg:end -->"


def test_ensure_is_noop_when_block_exists() -> None:
    content = "# T\r\nIntro\r\n<!-- bdg:begin -->\r\n![a](a)\r\n<!-- bdg:end -->\r\n"
    assert ensure_marker_block(content) is content


def test_ensure_skips_headings_inside_fences() -> None:
    content = "```md\n# Not a title\n```\n# Real\nText\n"
    assert ensure_marker_block(content) == (
        "```md\n# Not a title\n```\n# Real\n<!-- bdg:begin -->\n<!-- bdg:end -->\nText\n"
    )


def test_ensure_ignores_level_two_headings() -> None:
    assert ensure_marker_block("## Sub\n").startswith(BDG_BEGIN)


def test_ensure_preserves_crlf_and_trailing_newline() -> None:
    updated = ensure_marker_block("# T\r\nBody\r\n")
    assert updated == "# T\r\n<!-- bdg:begin -->\r\n<!-- bdg:end -->\r\nBody\r\n"


def test_ensure_repairs_duplicate_blocks_by_inserting() -> None:
    content = f"{BDG_BEGIN}\n{BDG_END}\n{BDG_BEGIN}\n{BDG_END}"
    updated = ensure_marker_block(content)
    assert marker_count(updated) == 3


def test_rewrite_is_idempotent() -> None:
    content = "<!-- bdg:begin -->\n![a](a)\n<!-- bdg:end -->"
    first = rewrite_marker_block(content, ["![a](a)"])
    second = rewrite_marker_block(first, ["![a](a)"])
    assert first == second == content


def test_rewrite_with_trailing_newline_is_idempotent() -> None:
    content = "# T\n<!-- bdg:begin -->\n<!-- bdg:end -->\nBody\n"
    first = rewrite_marker_block(content, ["![b](b)", "![c](c)"])
    second = rewrite_marker_block(first, ["![b](b)", "![c](c)"])
    assert first == second
    assert first == "# T\n<!-- bdg:begin -->\n![b](b)\n![c](c)\n<!-- bdg:end -->\nBody\n"


def test_rewrite_does_not_touch_content_outside_block() -> None:
    before = "# Title  \n\nIntro with trailing spaces   \n"
    after = "\nFooter\n\n\n"
    content = f"{before}{BDG_BEGIN}\n![a](a)\n{BDG_END}{after}"
    updated = rewrite_marker_block(content, ["![b](b)"])
    assert updated.startswith(f"{before}{BDG_BEGIN}\n")
    assert updated.endswith(f"{BDG_END}{after}")
    assert "![a](a)" not in updated


def test_rewrite_preserves_crlf_without_trailing_newline() -> None:
    content = "# T\r\n<!-- bdg:begin -->\r\n<!-- bdg:end -->\r\nEnd"
    updated = rewrite_marker_block(content, ["![a](a)"])
    assert updated == "# T\r\n<!-- bdg:begin -->\r\n![a](a)\r\n<!-- bdg:end -->\r\nEnd"
    assert "\n" not in updated.replace("\r\n", "")


def test_rewrite_preserves_crlf_trailing_newline() -> None:
    content = "# T\r\n<!-- bdg:begin -->\r\n<!-- bdg:end -->\r\n"
    updated = rewrite_marker_block(content, ["![a](a)"])
    assert updated.endswith("<!-- bdg:end -->\r\n")
    assert "\r\n![a](a)\r\n" in updated


def test_rewrite_rejects_duplicate_markers() -> None:
    content = f"{BDG_BEGIN}\n{BDG_END}\n{BDG_BEGIN}\n{BDG_END}"
    with pytest.raises(MarkerCountError, match="missing or duplicated"):
        rewrite_marker_block(content, [])


def test_rewrite_rejects_missing_markers() -> None:
    with pytest.raises(MarkerCountError):
        rewrite_marker_block("# Title\n", ["![a](a)"])


def test_rewrite_rejects_end_before_begin() -> None:
    with pytest.raises(MarkerOrderError, match="invalid marker block"):
        rewrite_marker_block(f"{BDG_END}\n{BDG_BEGIN}\n", [])


def test_markers_inside_code_fence_are_ignored() -> None:
    content = "# Title\n```md\n<!-- bdg:begin -->\n```\n<!-- bdg:begin -->\n<!-- bdg:end -->"
    updated = rewrite_marker_block(content, ["![a](a)"])
    assert updated == (
        "# Title\n```md\n<!-- bdg:begin -->\n```\n"
        "<!-- bdg:begin -->\n![a](a)\n<!-- bdg:end -->"
    )
    assert marker_count(content) == 1


def test_indented_fence_with_language_tag_toggles() -> None:
    content = "  ```html\n<!-- bdg:begin -->\n<!-- bdg:end -->\n  ```\n"
    assert marker_count(content) == 0
    assert ensure_marker_block(content).startswith(BDG_BEGIN)


def test_extract_managed_block_skips_blank_lines() -> None:
    content = f"{BDG_BEGIN}\n![a](a)\n\n   \n![b](b)\n{BDG_END}\n"
    assert extract_managed_block(content) == ["![a](a)", "![b](b)"]


@pytest.mark.parametrize(
    "content",
    [
        "no block here",
        f"{BDG_BEGIN}\n{BDG_BEGIN}\n{BDG_END}",
        f"{BDG_END}\n![a](a)\n{BDG_BEGIN}",
    ],
)
def test_extract_managed_block_is_lenient(content: str) -> None:
    assert extract_managed_block(content) == []


def test_extract_marker_block_lines_keeps_blank_lines() -> None:
    content = f"{BDG_BEGIN}\n![a](a)\n\n```\n{BDG_END}\n"
    with pytest.raises(MarkerCountError):
        # The unclosed fence hides the end marker.
        extract_marker_block_lines(content)
    content = f"{BDG_BEGIN}\n![a](a)\n\n```\n```\n{BDG_END}\n"
    assert extract_marker_block_lines(content) == ["![a](a)", "", "```", "```"]


def test_extract_marker_block_lines_rejects_invalid_order() -> None:
    with pytest.raises(MarkerOrderError):
        extract_marker_block_lines(f"{BDG_END}\n{BDG_BEGIN}")


def test_rewrite_lines_keeps_fence_lines_verbatim() -> None:
    content = f"# T\n{BDG_BEGIN}\nold\n{BDG_END}\n"
    lines = ["```md", "![x](https://example.com/x.svg)", "```"]
    updated = rewrite_marker_block_lines(content, lines)
    assert extract_marker_block_lines(updated) == lines


def test_remove_marker_block_drops_sentinels_and_body() -> None:
    content = "# T\n<!-- bdg:begin -->\n![a](a)\n<!-- bdg:end -->\nBody\n"
    updated = remove_marker_block(content)
    assert updated == "# T\nBody\n"
    assert extract_managed_block(updated) == []


def test_remove_marker_block_on_block_only_document() -> None:
    updated = remove_marker_block("<!-- bdg:begin -->\n![a](a)\n<!-- bdg:end -->")
    assert BDG_BEGIN not in updated
    assert BDG_END not in updated
    assert updated == ""


def test_remove_marker_block_requires_valid_block() -> None:
    with pytest.raises(MarkerCountError):
        remove_marker_block("# Nothing\n")


def test_marker_count_counts_begin_sentinels_outside_fences() -> None:
    content = f"{BDG_BEGIN}\n```\n{BDG_BEGIN}\n```\n{BDG_BEGIN}\n{BDG_END}"
    assert marker_count(content) == 2


def test_sentinels_must_match_exactly() -> None:
    assert marker_count(f"  {BDG_BEGIN}\n<!-- BDG:BEGIN -->\n") == 0


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("a\nb\n", ("LF", True)),
        ("a\nb", ("LF", False)),
        ("a\r\nb\r\n", ("CRLF", True)),
        ("a\r\nb", ("CRLF", False)),
        ("", ("LF", False)),
    ],
)
def test_readme_newline_info(content: str, expected: tuple[str, bool]) -> None:
    assert readme_newline_info(content) == expected


def test_ensure_leaves_single_misordered_pair_alone() -> None:
    content = f"{BDG_END}\n{BDG_BEGIN}\n"
    assert ensure_marker_block(content) == content
