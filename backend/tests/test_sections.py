from app.utils.sections import PAPER_SECTIONS, match_heading, split_paper_sections


def test_no_headings_returns_empty():
    text = "Just some prose.\nNothing that looks like a heading here at all."
    assert split_paper_sections(text) == {}


def test_basic_markdown_headings():
    text = "## Abstract\nFoo\n## Introduction\nBar"
    assert split_paper_sections(text) == {"Abstract": "Foo", "Introduction": "Bar"}


def test_preamble_before_first_heading_is_dropped():
    text = "Sure! Here is the paper.\n\n# Abstract\nBody text.\n"
    assert split_paper_sections(text) == {"Abstract": "Body text."}


def test_short_line_mentioning_title_is_a_heading():
    # "see Results" is short enough to pass as a heading
    text = "Abstract\nWe summarise.\nsee Results\nNumbers."
    sections = split_paper_sections(text)
    assert sections == {"Abstract": "We summarise.", "Results": "Numbers."}


def test_long_line_mentioning_title_is_body():
    text = (
        "## Discussion\n"
        "As shown in the Results section, the model outperforms baselines.\n"
    )
    sections = split_paper_sections(text)
    assert list(sections) == ["Discussion"]
    assert "Results section" in sections["Discussion"]


def test_repeated_heading_overwrites_body_and_keeps_position():
    text = "## Abstract\nfirst\n## Introduction\nintro\n## Abstract\nsecond"
    sections = split_paper_sections(text)
    assert sections == {"Abstract": "second", "Introduction": "intro"}
    assert list(sections) == ["Abstract", "Introduction"]


def test_order_follows_text_not_canonical_list():
    text = "## Conclusion\nend\n## Abstract\nstart"
    assert list(split_paper_sections(text)) == ["Conclusion", "Abstract"]


def test_tie_break_uses_canonical_order():
    # Both titles fit inside the threshold; list order wins over line order
    line = "Results Abstract"
    assert len(line) < len("Results") + 10
    assert match_heading(line) == "Abstract"


def test_match_is_case_insensitive():
    assert match_heading("## LITERATURE REVIEW") == "Literature Review"
    assert match_heading("The methodology we used is described below.") is None


def test_body_is_trimmed_and_keeps_inner_newlines():
    text = "## Methodology\n\nStep one.\nStep two.\n\n## References\n[1] A."
    sections = split_paper_sections(text, PAPER_SECTIONS)
    assert sections["Methodology"] == "Step one.\nStep two."
    assert sections["References"] == "[1] A."
