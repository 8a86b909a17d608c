"""
Unit tests for charset selection.
"""

import pytest
from novelsieve.extractor.encoding import decode_html, declared_charset, garbage_score, visible_text
from novelsieve.extractor.errors import MalformedDocumentError

from tests.helpers.pages import PROSE_SENTENCE


def _page(charset: str) -> str:
    return (
        f'<html><head><meta charset="{charset}"><title>斗破苍穹</title></head>'
        f"<body><p>{PROSE_SENTENCE}</p></body></html>"
    )


class TestDeclaredCharset:
    def test_html5_meta(self):
        assert declared_charset(b'<html><head><meta charset="GBK"></head></html>') == "gbk"

    def test_http_equiv_meta(self):
        raw = b'<meta http-equiv="Content-Type" content="text/html; charset=gb2312">'
        assert declared_charset(raw) == "gb2312"

    def test_missing_declaration(self):
        assert declared_charset(b"<html><body>hello</body></html>") is None


class TestGarbageScore:
    def test_clean_text_beats_mojibake(self):
        assert garbage_score(PROSE_SENTENCE) < garbage_score("锟斤拷锟斤拷锟斤拷锟斤拷锟斤拷")

    def test_replacement_characters_are_penalised(self):
        assert garbage_score(PROSE_SENTENCE + "\ufffd") > garbage_score(PROSE_SENTENCE)

    def test_box_glyphs_are_penalised(self):
        assert garbage_score(PROSE_SENTENCE + "□") > garbage_score(PROSE_SENTENCE)

    def test_latin_text_scores_worse_than_han(self):
        assert garbage_score("Ã¦Â–Â—Ã§Â ÂÃ¨Â‹ÂÃ§Â©Â¹") > garbage_score("斗破苍穹")

    def test_empty_text_is_worst(self):
        assert garbage_score("") > garbage_score("x")

    def test_han_ratio_separates_clean_candidates(self):
        assert garbage_score("Dou Po Cang Qiong") >= 1000
        assert garbage_score("斗破苍穹") == 0


class TestVisibleText:
    def test_markup_and_head_are_dropped(self):
        html = _page("utf-8").replace("</p>", "</p><script>var chapter = 1;</script>")
        assert visible_text(html) == PROSE_SENTENCE

    def test_clean_page_is_not_penalised(self):
        assert garbage_score(visible_text(_page("utf-8"))) < 1000

    def test_page_without_body(self):
        assert visible_text("<p>斗破苍穹</p>") == "斗破苍穹"


class TestDecodeHtml:
    def test_empty_payload_raises(self):
        with pytest.raises(MalformedDocumentError):
            decode_html(b"")

    def test_utf8_page(self):
        html = _page("utf-8")
        assert decode_html(html.encode("utf-8")) == html

    def test_utf8_page_labelled_latin1(self):
        html = _page("iso-8859-1")
        assert decode_html(html.encode("utf-8")) == html

    @pytest.mark.parametrize("charset", ["gbk", "gb18030"])
    def test_declared_chinese_charset(self, charset):
        html = _page(charset)
        assert decode_html(html.encode(charset)) == html

    def test_declared_charset_that_cannot_decode_is_skipped(self):
        """A page labelled utf-8 but stored as GBK still decodes to readable text."""
        html = _page("utf-8")
        decoded = decode_html(html.encode("gbk"))
        assert "\ufffd" not in decoded
        assert decoded.startswith('<html><head><meta charset="utf-8">')
