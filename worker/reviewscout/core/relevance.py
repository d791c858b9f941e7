"""Title relevance heuristic for search results."""

from itertools import combinations
from typing import List, Sequence


def tokenize_name(name: str) -> List[str]:
    return (name or "").lower().split()


def title_matches(title: str, name_tokens: Sequence[str]) -> bool:
    """Decide whether a lower-cased ``title`` plausibly names the entity.

    A single-token name must appear in the title. For longer names it is
    enough that both tokens of any one pair appear, in any order and with
    anything in between. An empty name matches nothing.
    """
    if not name_tokens:
        return False
    if len(name_tokens) == 1:
        return name_tokens[0] in title
    return any(first in title and second in title for first, second in combinations(name_tokens, 2))
