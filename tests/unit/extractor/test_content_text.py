"""
Unit tests for rendering a content node as chapter text.
"""

from novelsieve.extractor import node_to_text

from tests.helpers.pages import make_doc


def _node(body: str):
    return make_doc(f"<div id='c'>{body}</div>").select_first("#c")


def test_lines_follow_block_structure():
    node = _node("<p>第一段，内容。</p><p>第二段。</p>第三段。<br>第四段。")
    assert node_to_text(node) == "第一段，内容。\n第二段。\n第三段。\n第四段。"


def test_links_and_scripts_are_dropped():
    node = _node("<p>第二段。<a href='/next'>下一章</a></p><script>var a=1;</script><iframe></iframe>结尾。")
    assert node_to_text(node) == "第二段。\n结尾。"


def test_watermarks_are_scrubbed():
    node = _node(
        "<p>第一段，内容。</p>"
        "请记住本站www.biquge.com<br>"
        "最后一段。https://m.example.com/book/1.html<br>"
        "笔趣阁手机版阅读网址<br>"
        "章节错误，点此报送"
    )
    assert node_to_text(node) == "第一段，内容。\n请记住本站\n最后一段。\n章节错误，点此报送"


def test_custom_scrub_patterns_replace_defaults():
    node = _node("正文内容。www.keep.example<br>广告：充值送书券")
    assert node_to_text(node, [r"广告：.*"]) == "正文内容。www.keep.example"


def test_empty_node_renders_empty_text():
    assert node_to_text(_node("<a href='/'>首页</a>")) == ""
