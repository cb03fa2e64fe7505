"""Paragraph classification from the silence between spurts."""

from __future__ import annotations

from typing import Optional, Union

from .models import Spurt, SpurtCandidate


def end_time_ms(spurt: Union[Spurt, SpurtCandidate]) -> float:
    """Return when typing of ``spurt`` stopped, in epoch milliseconds."""
    return spurt.created_at + spurt.duration * 1000


def gap_ms(older: Union[Spurt, SpurtCandidate], newer: Union[Spurt, SpurtCandidate]) -> float:
    """Silence between the end of ``older`` and the completion of ``newer``.

    Clock anomalies can make the raw difference negative; it is clamped to zero.
    """
    return max(0.0, newer.created_at - end_time_ms(older))


def is_paragraph_start(
    candidate: Union[Spurt, SpurtCandidate],
    previous: Optional[Spurt],
    paragraph_threshold_ms: float,
) -> bool:
    if previous is None:
        return True
    # Measured from the end of the previous spurt, so a long spurt alone never
    # opens a paragraph.
    return gap_ms(previous, candidate) > paragraph_threshold_ms
