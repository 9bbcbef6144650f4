"""
Text formatting helpers for the report blocks.

Rows are aligned with tab characters, so label widths are measured in
tab stops of eight columns.
"""

import math

BAR_WIDTH = 25
LABEL_WIDTH = 15
TAB_WIDTH = 8
FILLED = "#"
EMPTY = "-"


def format_label(text: str, max_tabs: int) -> str:
    """
    Truncate a label to a fixed width and pad it with tabs.

    Labels longer than 15 characters keep their first 12 characters followed
    by ``...``. The label is then followed by ``max_tabs - len(label) // 8``
    tab characters.

    Args:
        text: Label to render
        max_tabs: Number of tab stops the column occupies

    Returns:
        The padded label
    """
    if len(text) > LABEL_WIDTH:
        text = text[:LABEL_WIDTH - 3] + "..."
    return text + "\t" * (max_tabs - len(text) // TAB_WIDTH)


def progress_bar(fraction: float) -> str:
    """
    Render ``fraction`` as a 25 character bar of ``#`` and ``-``.

    Raises:
        ValueError: If fraction is outside [0, 1]
    """
    if math.isnan(fraction) or not 0 <= fraction <= 1:
        raise ValueError(f"progress fraction must be within [0, 1], got {fraction}")
    filled = int(fraction * BAR_WIDTH)
    return FILLED * filled + EMPTY * (BAR_WIDTH - filled)


def ratio(count: float, total: float) -> float:
    """Return count/total, or 0.0 when there is nothing to divide by."""
    if not total:
        return 0.0
    return count / total


def format_row(label: str, value: str, fraction: float, percent: float) -> str:
    """Build one ``label  value  bar  percent`` line of a report block."""
    return "%s%s%s\t%.2f%%\n" % (
        format_label(label, 2),
        format_label(value, 2),
        progress_bar(fraction),
        percent,
    )
