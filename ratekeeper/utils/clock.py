"""
Clock helpers.

Record timestamps are integer epoch milliseconds.
"""

import time
from typing import Callable

Clock = Callable[[], int]


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


# Design Rationale and Trade-offs:
#
# 1. Why integer epoch milliseconds?
#    - Sortable, JSON-friendly, and timezone-free
#    - Trade-off: Display code converts to datetime
