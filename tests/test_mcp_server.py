import pytest

from moodle_embedded import mcp_server
from moodle_embedded.config import ConfigurationError

from conftest import add_page, page_content


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("DATABASE_URL", "MOODLE_TABLE_PREFIX", "MOODLE_DATAROOT", "MOODLE_WWWROOT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def database_env(engine, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", engine.url.render_as_string(hide_password=False))
    monkeypatch.setenv("MOODLE_WWWROOT", "https://lms.test/")


def test_targets_lists_catalog():
    lines = mcp_server.targets().splitlines()
    assert len(lines) == 14
    assert "page-content = Page Content" in lines
    assert "wiki_pages-cachedcontent = Wiki Pages" in lines


def test_report_uses_environment_database(engine, database_env):
    content = '<img src="http://x.test/pic.png"><a href="http://x.test/run.jsp">j</a>'
    add_page(engine, 3, 12, "Welcome", content)

    assert mcp_server.report("page-content", "x.test", "jsp") == (
        "Welcome <https://lms.test/mod/page/view.php?id=12>\n"
        "  image: http://x.test/pic.png\n"
    )
    assert page_content(engine, 3) == content


def test_report_without_matches(database_env):
    assert mcp_server.report("page-content", "x.test") == "No matching records."


def test_report_rejects_unknown_area(database_env):
    with pytest.raises(ConfigurationError):
        mcp_server.report("nope-nothing", "x.test")


def test_report_requires_database():
    with pytest.raises(ConfigurationError):
        mcp_server.report("page-content", "x.test")
