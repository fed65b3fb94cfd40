import re
from dataclasses import dataclass
from typing import Any, Optional

# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------

# Inclusive bounds of a Roblox group role rank.
MIN_RANK = 0
MAX_RANK = 255


@dataclass(frozen=True)
class RankRequest:
    handle: str  # Roblox username as supplied by the caller
    rank_value: int


@dataclass(frozen=True)
class RankResult:
    handle: str
    user_id: int
    data: Any  # upstream result, passed through to the response untouched


# ASCII digits only: fullwidth or other Unicode digits do not count as a number.
_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)", re.ASCII)


def parse_leading_int(raw: str) -> Optional[int]:
    """Read the integer at the start of `raw` ("50abc" -> 50). None if there is none."""
    match = _LEADING_INT_RE.match(raw)
    return int(match.group(1)) if match else None
