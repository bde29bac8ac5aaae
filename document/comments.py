"""
Table comment parsing.

Table comments may follow the ``表中文名称：X|表用途：Y`` convention; the labels
are optional and a comment without the delimiter is used for both lines.
"""
import re
from typing import List, Optional, Tuple

DISPLAY_NAME_LABEL = "表中文名称"
PURPOSE_LABEL = "表用途"

LABEL_PATTERN = re.compile(rf"^\s*({DISPLAY_NAME_LABEL}|{PURPOSE_LABEL})\s*[：:]\s*")


def strip_label(part: str) -> Tuple[Optional[str], str]:
    """Split a leading ``label：`` off a comment part; the label is None if absent."""
    match = LABEL_PATTERN.match(part)
    if match is None:
        return None, part.strip()
    return match.group(1), part[match.end():].strip()


def split_table_comment(comment: Optional[str], delimiter: str = "|") -> Tuple[str, str]:
    """
    Split a table comment into its display name and purpose.

    A label that appears twice only names its first part; the second part
    is treated as unlabeled text.

    Args:
        comment: Raw table comment from the catalog
        delimiter: Separator between the two facets

    Returns:
        Tuple of (display name, purpose)
    """
    comment = (comment or "").strip()
    if delimiter not in comment:
        _, text = strip_label(comment)
        return text, text

    labeled = {}
    unlabeled: List[str] = []
    for part in comment.split(delimiter, 1):
        label, text = strip_label(part)
        if label is None or label in labeled:
            unlabeled.append(text)
        else:
            labeled[label] = text

    display_name = labeled.get(DISPLAY_NAME_LABEL)
    purpose = labeled.get(PURPOSE_LABEL)
    if display_name is None:
        display_name = unlabeled.pop(0) if unlabeled else ""
    if purpose is None:
        purpose = unlabeled.pop(0) if unlabeled else ""
    return display_name, purpose
