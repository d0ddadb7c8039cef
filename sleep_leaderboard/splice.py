#!/usr/bin/env python3
"""
README block replacement between marker comments.
"""

LEADERBOARD_START = "<!-- LEADERBOARD_START -->"
LEADERBOARD_END = "<!-- LEADERBOARD_END -->"


def splice_block(
    document: str,
    block: str,
    start_marker: str = LEADERBOARD_START,
    end_marker: str = LEADERBOARD_END,
) -> str:
    """
    Replace the text between the markers with block.

    Everything outside the markers is kept as is. When the markers are missing
    or out of order, a marked block is inserted after the first paragraph
    (normally the title), or appended if the document has no blank line.
    """
    start = document.find(start_marker)
    end = document.find(end_marker)

    if start == -1 or end == -1 or end < start:
        marked = f"{start_marker}\n{block}\n{end_marker}\n"
        insert_at = document.find("\n\n")
        if insert_at == -1:
            return f"{document}\n\n{marked}"
        return f"{document[:insert_at]}\n\n{marked}{document[insert_at + 2:]}"

    return f"{document[:start + len(start_marker)]}\n{block}\n{document[end:]}"
