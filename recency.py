"""Time-window policy for deciding whether an event is new enough to announce."""

from collections.abc import Container
from typing import Optional

from models import BuildSnapshot

RECENCY_WINDOW = 3600


def is_eligible(timestamp: int, now: float, window: int = RECENCY_WINDOW) -> bool:
    """True if timestamp is less than window seconds before now.

    Exactly window seconds old is not eligible. A timestamp ahead of now
    (publisher clock skew) has a negative age and is eligible.
    """
    return now - timestamp < window


def which_branch_updated(
    snapshot: BuildSnapshot,
    now: float,
    window: int = RECENCY_WINDOW,
    skip: Container[str] = (),
) -> Optional[str]:
    """Name of the first branch, in public/beta/private order, updated within window.

    Branches named in skip are passed over, so a later branch can still be reported.
    """
    for branch in snapshot.in_priority_order():
        if branch.name not in skip and is_eligible(branch.time_updated, now, window):
            return branch.name
    return None
