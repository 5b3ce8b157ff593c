import re
from typing import List

from app.models.schemas import Citation

YEAR_RE = re.compile(r"\(([0-9]{4})\)")


def parse_citation(line: str) -> Citation:
    """Best-effort parse of one APA-like citation line. Never raises."""
    year_match = YEAR_RE.search(line)

    # Title sits between the first ")." and the next ".", e.g.
    # "Smith, J. (2020). Title here. Journal X."
    title = ""
    segments = line.split(").")
    if len(segments) > 1:
        title = segments[1].split(".")[0].strip()

    return Citation(
        text=line,
        type="article",
        year=year_match.group(1) if year_match else "",
        authors=line.split("(")[0].strip(),
        title=title,
    )


def extract_citations(text: str) -> List[Citation]:
    """One citation per non-blank line, input order preserved."""
    return [parse_citation(line) for line in text.split("\n") if line.strip()]
