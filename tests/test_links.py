from moodle_embedded.links import extract_links, find_candidate_links, qualifies
from moodle_embedded.models import CandidateLink
from moodle_embedded.utils import split_exceptions


def test_extract_links_in_text_order():
    html = '<a href="http://a.test/1">x</a><img src="http://a.test/2"><a href="/local">y</a>'
    assert list(extract_links(html, "href")) == ["http://a.test/1", "/local"]
    assert list(extract_links(html, "src")) == ["http://a.test/2"]


def test_extract_links_stops_at_quote_and_whitespace():
    html = (
        '<img src="http://a.test/has space.png">'
        "<img src='http://a.test/single.png'>"
        '<img src=http://a.test/bare.png>'
        '<img src="">'
        '<img src="http://a.test/ok.png">'
    )
    assert list(extract_links(html, "src")) == ["http://a.test/ok.png"]


def test_extract_links_is_lazy_and_restartable():
    html = '<img src="one"><img src="two">'
    links = extract_links(html, "src")
    assert next(links) == "one"
    assert list(extract_links(html, "src")) == ["one", "two"]


def test_extract_links_handles_empty_text():
    assert list(extract_links("", "src")) == []
    assert list(extract_links(None, "href")) == []


def test_qualifies_requires_match_substring():
    assert qualifies("http://x.test/pic", "x.test", [])
    assert not qualifies("http://y.test/pic", "x.test", [])


def test_qualifies_is_case_sensitive():
    assert not qualifies("http://X.TEST/pic", "x.test", [])


def test_exception_disqualifies_match():
    url = "http://x.test/webapps/execute/thing.jsp"
    assert qualifies(url, "x.test", ["other"])
    assert not qualifies(url, "x.test", ["jsp", "other"])
    assert not qualifies(url, "x.test", ["x.test"])


def test_split_exceptions():
    assert split_exceptions("") == []
    assert split_exceptions(None) == []
    assert split_exceptions("jsp,execute") == ["jsp", "execute"]
    assert split_exceptions("jsp,,execute,") == ["jsp", "execute"]


def test_find_candidate_links_scans_images_before_files():
    html = (
        '<a href="http://x.test/doc.pdf">doc</a>'
        '<img src="http://x.test/pic.png">'
        '<a href="http://other.test/page">other</a>'
    )
    assert list(find_candidate_links(html, "x.test")) == [
        CandidateLink(url="http://x.test/pic.png", kind="image"),
        CandidateLink(url="http://x.test/doc.pdf", kind="file"),
    ]
