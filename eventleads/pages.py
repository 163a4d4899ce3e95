"""Parse page selectors such as ``"6"``, ``"1-5"``, ``"3,5,7"`` or ``"1-3,7,9-10"``."""

import re

# Leading integer of a token; trailing junk is ignored ("5abc" -> 5)
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def _to_int(text: str) -> int | None:
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else None


def parse_pages(selector: str) -> list[int]:
    """
    Return the distinct positive page numbers selected by *selector*, ascending.

    Comma-separated tokens are either a single page (``"7"``) or an inclusive
    range (``"3-7"``, endpoints in any order). A range uses the first two
    dash-separated endpoints, so ``"1-2-3"`` means pages 1 and 2. Tokens that
    do not start with a number, and pages below 1, are dropped silently.
    """
    pages: set[int] = set()

    for part in (p.strip() for p in selector.split(",")):
        if not part:
            continue

        if "-" in part:
            start_text, end_text = part.split("-")[:2]
            start, end = _to_int(start_text), _to_int(end_text)
            if start is None or end is None:
                continue
            low, high = min(start, end), max(start, end)
            pages.update(i for i in range(max(low, 1), high + 1))
        else:
            num = _to_int(part)
            if num is not None and num > 0:
                pages.add(num)

    return sorted(pages)
