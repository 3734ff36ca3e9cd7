from typing import TypedDict


class RunStats(TypedDict):
    needle_lines: int
    haystack_lines: int
    haystack_keys: int
    found: int
    missing: int
    seconds: float
