from app.utils.citations import extract_citations, parse_citation


def test_parse_apa_like_line():
    c = parse_citation("Smith, J. (2020). Deep learning methods. Journal X.")
    assert c.year == "2020"
    assert c.authors == "Smith, J."
    assert c.title == "Deep learning methods"
    assert c.type == "article"
    assert c.text == "Smith, J. (2020). Deep learning methods. Journal X."


def test_line_without_parentheses():
    c = parse_citation("  Unstructured reference without a year  ")
    assert c.year == ""
    assert c.authors == "Unstructured reference without a year"
    assert c.title == ""


def test_non_year_parentheses():
    c = parse_citation("Lee, K. (n.d.). Untitled work. Publisher.")
    assert c.year == ""
    assert c.authors == "Lee, K."
    assert c.title == "Untitled work"


def test_title_stops_at_next_closing_paren_dot():
    c = parse_citation("Ng, A. (2019). Learning (revised). Press.")
    assert c.title == "Learning (revised"


def test_year_must_be_four_digits():
    c = parse_citation("Roe, P. (20201). Title. Venue.")
    assert c.year == ""


def test_numbered_line_keeps_prefix_in_authors():
    c = parse_citation("1. Brown, T. (2021). Few-shot learners. NeurIPS.")
    assert c.authors == "1. Brown, T."
    assert c.year == "2021"


def test_blank_lines_are_skipped_and_order_kept():
    text = "A, B. (2001). First. J.\n\n   \nC, D. (2002). Second. J.\n"
    citations = extract_citations(text)
    assert [c.year for c in citations] == ["2001", "2002"]
    assert len(citations) <= len(text.split("\n"))


def test_raw_text_is_not_trimmed():
    citations = extract_citations("  X, Y. (1999). Old. J.  ")
    assert citations[0].text == "  X, Y. (1999). Old. J.  "


def test_empty_input():
    assert extract_citations("") == []
