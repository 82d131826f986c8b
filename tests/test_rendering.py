import re

from markupsafe import Markup

from rendering import SafeHTML, to_safe_html


def test_heading_is_rendered():
    html = to_safe_html("# Hello, World!")

    assert "<h1>Hello, World!</h1>" in html


def test_returns_safe_fragment():
    html = to_safe_html("*hi*")

    assert isinstance(html, SafeHTML)
    assert isinstance(html, Markup)
    assert "<em>hi</em>" in html


def test_script_tags_are_removed():
    html = to_safe_html("before\n\n<script>alert('x')</script>\n\nafter")

    assert "<script" not in html.lower()
    assert "before" in html
    assert "after" in html


def test_event_handler_attributes_are_removed():
    html = to_safe_html('<img src="https://example.com/a.png" onerror="alert(1)">')

    assert "onerror" not in html
    assert 'src="https://example.com/a.png"' in html


def test_javascript_links_are_dropped():
    html = to_safe_html("[click](javascript:alert(1))")

    assert "javascript:" not in html
    assert "click" in html


def test_disallowed_tags_are_stripped():
    html = to_safe_html('<iframe src="https://evil.example"></iframe><p style="color:red">text</p>')

    assert "<iframe" not in html
    assert "style=" not in html
    assert "text" in html


def test_links_and_code_survive():
    html = to_safe_html("[site](https://example.com)\n\n```\nprint(1)\n```")

    assert '<a href="https://example.com">site</a>' in html
    assert "<code>" in html


def test_empty_input():
    for source in ("", "   \n"):
        html = to_safe_html(source)

        assert re.sub(r"</?p>", "", html).strip() == ""


def test_rendering_is_deterministic():
    source = "## Title\n\n- one\n- two\n\n<b onclick='x()'>bold</b>"

    assert to_safe_html(source) == to_safe_html(source)
