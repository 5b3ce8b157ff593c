from typing import Dict, List, Optional, Sequence

PAPER_SECTIONS = [
    "Abstract",
    "Introduction",
    "Literature Review",
    "Methodology",
    "Results",
    "Discussion",
    "Conclusion",
    "References",
]

# A heading line may carry up to this many extra characters around the
# title (markdown hashes, numbering, a trailing colon).
HEADING_SLACK = 10


def match_heading(line: str, titles: Sequence[str] = PAPER_SECTIONS) -> Optional[str]:
    """Return the first title in ``titles`` that ``line`` looks like a heading for."""
    lower = line.lower()
    for title in titles:
        if title.lower() in lower and len(line) < len(title) + HEADING_SLACK:
            return title
    return None


def split_paper_sections(
    text: str, titles: Sequence[str] = PAPER_SECTIONS
) -> Dict[str, str]:
    """
    Splits generated paper text into canonical sections.
    Returns dict: {section_title: section_body}, in order of appearance.

    Lines before the first heading are dropped. A title that appears twice
    keeps its first position but takes the body of the last occurrence.
    """
    sections: Dict[str, str] = {}
    current_section: Optional[str] = None
    current_lines: List[str] = []

    for line in text.split("\n"):
        heading = match_heading(line, titles)
        if heading:
            if current_section:
                sections[current_section] = "\n".join(current_lines).strip()
            current_section = heading
            current_lines = []
        elif current_section:
            current_lines.append(line)

    if current_section:
        sections[current_section] = "\n".join(current_lines).strip()

    return sections
