"""Tests for HTML content extraction."""
from study_helper.extractor import (
    strip_html, extract_sentences, extract_key_terms, extract_list_items,
    extract_headings, first_sentence,
)


def test_strip_html_removes_tags_and_collapses_whitespace():
    html = "<h1>Cells</h1>\n<p>A   <strong>cell</strong>\tis small.</p>"
    assert strip_html(html) == "Cells A cell is small."


def test_strip_html_decodes_entities():
    html = "<p>Fish&nbsp;&amp;&nbsp;chips &lt;b&gt; &quot;yes&quot; it&#39;s</p>"
    assert strip_html(html) == "Fish & chips <b> \"yes\" it's"


def test_strip_html_empty():
    assert strip_html("") == ""
    assert strip_html(None) == ""


def test_extract_sentences_drops_short_fragments():
    text = "Short one. This sentence is long enough to keep! Tiny? Another sentence that is kept here."
    assert extract_sentences(text) == [
        "This sentence is long enough to keep",
        "Another sentence that is kept here",
    ]


def test_extract_sentences_splits_on_runs_of_punctuation():
    text = "What is going on here today?!? Everything is absolutely fine here..."
    assert extract_sentences(text) == [
        "What is going on here today",
        "Everything is absolutely fine here",
    ]


def test_first_sentence():
    assert first_sentence(" The mitochondria is the powerhouse. More text") == "The mitochondria is the powerhouse"
    assert first_sentence("tiny") is None


def test_extract_key_terms_order_and_dedup():
    html = (
        "<p><strong>Mitosis</strong> and <em>meiosis</em> and <b>Mitosis</b> "
        "and <mark class='hl'>cell division is a long highlighted passage</mark></p>"
    )
    assert extract_key_terms(html) == [
        "Mitosis", "meiosis", "cell division is a long highlighted passage",
    ]


def test_extract_key_terms_length_limits():
    long_bold = "x" * 50
    long_mark = "y" * 60
    html = f"<b>ab</b><b>{long_bold}</b><i>abc</i><mark>{long_mark}</mark><mark>{'z' * 100}</mark>"
    assert extract_key_terms(html) == ["abc", long_mark]


def test_extract_key_terms_ignores_nested_markup():
    # nested tags are not matched; an accepted approximation
    assert extract_key_terms("<strong>a <em>b</em> c</strong>") == []


def test_extract_list_items():
    html = "<ul><li>Short</li><li>Long enough item</li><li class='x'>Another item here</li></ul>"
    assert extract_list_items(html) == ["Long enough item", "Another item here"]


def test_extract_headings():
    html = "<h1>Cells</h1><h2>Why</h2><h3 id='m'>Membranes</h3><h7>Nope</h7>"
    assert extract_headings(html) == ["Cells", "Membranes"]


def test_malformed_html_does_not_raise():
    html = "<h1>Unclosed <strong>term<li>item without end"
    assert extract_headings(html) == []
    assert extract_key_terms(html) == []
    assert extract_list_items(html) == []
    assert strip_html(html) == "Unclosed term item without end"
