from moodle_embedded.models import LogEntry
from moodle_embedded.rewrite import append_log, rewrite_text


def test_rewrite_text_with_empty_map_is_identity():
    text = '<img src="http://x.test/pic">'
    assert rewrite_text(text, {}) == text


def test_rewrite_text_replaces_every_occurrence():
    text = (
        '<img src="http://x.test/a"><a href="http://x.test/a">a</a>'
        '<a href="http://x.test/b.pdf">b</a><img src="http://x.test/c">'
    )
    updated = rewrite_text(
        text,
        {"http://x.test/a": "/bb/a.png", "http://x.test/b.pdf": "/bb/b.pdf"},
    )
    assert updated == (
        '<img src="/bb/a.png"><a href="/bb/a.png">a</a>'
        '<a href="/bb/b.pdf">b</a><img src="http://x.test/c">'
    )
    assert rewrite_text(updated, {}) == updated


def test_append_log_appends_rows_without_header(tmp_path):
    log_path = tmp_path / "log.csv"
    first = LogEntry(12, "page", "content", 3, "image", "http://x.test/pic", "/webpath/pic.png")
    second = LogEntry(13, "page", "content", 4, "file", "http://x.test/a.pdf", "/webpath/a.pdf")

    assert append_log(log_path, [first]) == 1
    assert append_log(log_path, [second]) == 1
    assert append_log(log_path, []) == 0

    assert log_path.read_text(encoding="utf-8").splitlines() == [
        "12,page,content,3,image,http://x.test/pic,/webpath/pic.png",
        "13,page,content,4,file,http://x.test/a.pdf,/webpath/a.pdf",
    ]


def test_rewrite_text_handles_url_that_prefixes_another():
    text = '<img src="http://x.test/pic"><a href="http://x.test/pic.png">p</a>'
    updated = rewrite_text(
        text,
        {"http://x.test/pic": "/webpath/pic.png", "http://x.test/pic.png": "/webpath/pic_1.png"},
    )
    assert updated == '<img src="/webpath/pic.png"><a href="/webpath/pic_1.png">p</a>'


def test_rewrite_text_does_not_rescan_substituted_paths():
    text = '<img src="http://x.test/a">'
    updated = rewrite_text(
        text,
        {"http://x.test/a": "http://x.test/b", "http://x.test/b": "/webpath/b"},
    )
    assert updated == '<img src="http://x.test/b">'
