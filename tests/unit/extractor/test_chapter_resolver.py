"""
Unit tests for chapter index detection.
"""

import pytest
from novelsieve.extractor import ChapterLink, ChapterListResolver

from tests.helpers.pages import BOOK_URL, make_doc

BASE = "https://www.example.com/book/12/"


@pytest.fixture
def resolver() -> ChapterListResolver:
    return ChapterListResolver()


class TestChapterLink:
    def test_equality_is_by_url(self):
        assert ChapterLink("第一章 开始", "https://a.example/1.html") == ChapterLink("序章", "https://a.example/1.html")
        assert ChapterLink("第一章", "https://a.example/1.html") != ChapterLink("第一章", "https://a.example/2.html")
        assert len({ChapterLink("a", "https://a.example/1"), ChapterLink("b", "https://a.example/1")}) == 1

    def test_title_is_trimmed(self):
        assert ChapterLink("  第一章  ", "https://a.example/1").title == "第一章"

    @pytest.mark.parametrize("title, url", [("", "https://a.example/1"), ("   ", "https://a.example/1"), ("第一章", "")])
    def test_empty_fields_are_rejected(self, title, url):
        with pytest.raises(ValueError):
            ChapterLink(title, url)


class TestContainerValidation:
    def test_three_chapter_links_are_enough(self, resolver):
        doc = make_doc(
            '<div class="catalog">'
            '<a href="12.html">第12章 风起</a><a href="13.html">第13章 云涌</a><a href="14.html">第14章 雷动</a>'
            "</div>",
            BASE,
        )
        chapters = resolver.resolve_chapter_list(doc, BASE)
        assert [(c.title, c.url) for c in chapters] == [
            ("第12章 风起", BASE + "12.html"),
            ("第13章 云涌", BASE + "13.html"),
            ("第14章 雷动", BASE + "14.html"),
        ]

    def test_two_chapter_links_are_not_enough(self, resolver):
        doc = make_doc(
            '<div class="catalog">'
            '<a href="1.html">第一章 开始</a><a href="2.html">第二章 继续</a>'
            '<a href="/">首页</a><a href="/top">排行榜</a><a href="/new">最新章节</a><a href="/shelf">加入书架</a>'
            "</div>",
            BASE,
        )
        assert resolver.find_container(doc) is None
        assert resolver.resolve_chapter_list(doc, BASE) == []

    def test_threshold_is_configurable(self):
        doc = make_doc('<div id="list"><a href="1.html">第一章</a><a href="2.html">第二章</a></div>', BASE)
        assert ChapterListResolver(min_chapter_links=2).find_container(doc) is not None
        assert ChapterListResolver().find_container(doc) is None

    def test_later_selector_used_when_earlier_container_fails(self, resolver):
        doc = make_doc(
            '<div class="catalog"><a href="/">首页</a><a href="1.html">第一章</a></div>'
            '<ul class="chapter-list"><li><a href="1.html">第一章</a></li>'
            '<li><a href="2.html">第二章</a></li><li><a href="3.html">第三章</a></li></ul>',
            BASE,
        )
        container = resolver.find_container(doc)
        assert container is not None
        assert container.tag == "ul"

    def test_every_match_of_a_selector_is_tried(self, resolver):
        doc = make_doc(
            '<div class="catalog" id="latest"><a href="9.html">第九章</a></div>'
            '<div class="catalog" id="full"><a href="1.html">第一章</a>'
            '<a href="2.html">第二章</a><a href="3.html">第三章</a></div>',
            BASE,
        )
        assert resolver.find_container(doc).id == "full"

    def test_no_catalog_on_page(self, resolver):
        doc = make_doc("<div class='content'><a href='1.html'>第一章</a></div>", BASE)
        assert resolver.resolve_chapter_list(doc, BASE) == []


class TestExtractChapters:
    def test_filters_non_chapter_and_unusable_links(self, resolver):
        doc = make_doc(
            '<div class="listmain">'
            '<a href="1.html">第一章 陨落的天才</a>'
            '<a href="/new">最新章节</a>'
            '<a href="javascript:void(0)">第二章 斗气大陆</a>'
            "<a>第三章 客人</a>"
            '<a href="4.html">   </a>'
            '<a href="5.html">第五章 云岚宗</a>'
            "</div>",
            BASE,
        )
        chapters = resolver.extract_chapters(doc.select_first("div.listmain"), BASE)
        assert [c.url for c in chapters] == [BASE + "1.html", BASE + "5.html"]

    def test_document_order_and_duplicates_are_preserved(self, resolver):
        doc = make_doc(
            '<div class="catalog"><a href="3.html">第三章</a><a href="1.html">第一章</a>'
            '<a href="2.html">第二章</a><a href="3.html">第三章</a></div>',
            BASE,
        )
        chapters = resolver.resolve_chapter_list(doc, BASE)
        assert [c.title for c in chapters] == ["第三章", "第一章", "第二章", "第三章"]

    def test_base_url_resolves_links_when_document_has_none(self, resolver):
        doc = make_doc(
            '<div class="catalog"><a href="1.html">第一章</a><a href="2.html">第二章</a><a href="3.html">第三章</a></div>'
        )
        container = resolver.find_container(doc)
        assert resolver.extract_chapters(container) == []
        assert [c.url for c in resolver.extract_chapters(container, BASE)] == [
            BASE + "1.html",
            BASE + "2.html",
            BASE + "3.html",
        ]

    def test_book_page_catalog(self, resolver, book_doc):
        chapters = resolver.resolve_chapter_list(book_doc, BOOK_URL)
        assert [c.title for c in chapters] == ["第一章 陨落的天才", "第二章 斗气大陆", "第三章 客人"]
        assert chapters[0].url == BOOK_URL + "1.html"
