"""Composite security score.

This is a coarse, explainable heuristic, not a calibrated risk model. It
starts at 10, loses half a point per known vulnerability (at most 5) and one
point per typosquatting suspect (at most 2), and never drops below 0.
"""

from __future__ import annotations

MAX_SCORE = 10.0
VULNERABILITY_WEIGHT = 0.5
MAX_VULNERABILITY_PENALTY = 5.0
MAX_SUSPECT_PENALTY = 2.0


def score(vuln_count: int, suspect_count: int) -> float:
    """Compute the security score in [0, 10], rounded to one decimal."""
    value = MAX_SCORE
    value -= min(max(vuln_count, 0) * VULNERABILITY_WEIGHT, MAX_VULNERABILITY_PENALTY)
    value -= min(float(max(suspect_count, 0)), MAX_SUSPECT_PENALTY)
    return round(max(0.0, value), 1)
