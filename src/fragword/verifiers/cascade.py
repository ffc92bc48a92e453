"""Cascading filter for board issues."""

from typing import Dict, List

from .models import BoardIssue


# Cascade level constants, in the order checks are reported
WORD = 0  # A multi-cell run is not an allowed word
STANDALONE = 1  # A lone fragment is not an allowed word
CONNECTIVITY = 2  # Tiles not reachable from a seed


def filter_cascading_issues(
    issues: List[BoardIssue],
    max_issues: int = 5
) -> List[BoardIssue]:
    """
    Keep only the issues of the highest-priority level present.

    A bad word usually leaves stranded fragments and broken groups behind
    it, so lower levels are hidden until the higher ones are fixed.

    Args:
        issues: Issues collected by board validation
        max_issues: Maximum number of issues to return (default 5)

    Returns:
        Filtered list of issues, limited to max_issues
    """
    if not issues:
        return issues

    by_level: Dict[int, List[BoardIssue]] = {}
    for issue in issues:
        by_level.setdefault(issue.cascade_level, []).append(issue)

    result = by_level[min(by_level)]

    if len(result) > max_issues:
        kept = result[:max_issues - 1]
        num_hidden = len(result) - len(kept)
        kept.append(BoardIssue(
            code="ADDITIONAL_ISSUES",
            message=f"... and {num_hidden} more similar issue{'s' if num_hidden > 1 else ''}. Fix the above first.",
            cascade_level=result[0].cascade_level
        ))
        return kept

    return list(result)
