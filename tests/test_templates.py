import pytest

from pagelink.config import SiteConfig
from pagelink.errors import (
    OutputCreateError,
    TemplateExecError,
    TemplateNotFound,
    TemplateParseError,
)
from pagelink.templates import TemplateEngine, render_page


def write_theme(root, template, theme="minimal"):
    theme_dir = root / "themes" / theme
    theme_dir.mkdir(parents=True)
    (theme_dir / "index.html").write_text(template, encoding="utf-8")
    return theme_dir


def test_render_page_writes_index(tmp_path):
    write_theme(tmp_path, "<title>{{ Config.Title }}</title>")
    config = SiteConfig({"theme": "minimal", "Title": "Hi"})

    output = render_page(config, tmp_path)

    assert output == tmp_path / "index.html"
    assert output.read_text(encoding="utf-8") == "<title>Hi</title>"


def test_render_page_uses_selected_theme_only(tmp_path):
    write_theme(tmp_path, "minimal:{{ Config.Title }}", theme="minimal")
    write_theme(tmp_path, "bold:{{ Config.Title }}", theme="bold")

    render_page(SiteConfig({"theme": "bold", "Title": "x"}), tmp_path)

    assert (tmp_path / "index.html").read_text(encoding="utf-8") == "bold:x"


def test_render_page_loops_and_conditionals(tmp_path):
    write_theme(
        tmp_path,
        "{% if Config.bio %}<p>{{ Config.bio }}</p>{% endif %}"
        "<ul>{% for link in Config.links %}"
        '<li><a href="{{ link.url }}">{{ link.title }}</a></li>'
        "{% endfor %}</ul>",
    )
    config = SiteConfig(
        {
            "theme": "minimal",
            "bio": "",
            "links": [
                {"title": "One", "url": "https://one.example"},
                {"title": "Two", "url": "https://two.example/?a=1&b=2"},
            ],
        }
    )
    render_page(config, tmp_path)
    html = (tmp_path / "index.html").read_text(encoding="utf-8")
    assert "<p>" not in html
    assert html.index("One") < html.index("Two")
    assert 'href="https://two.example/?a=1&amp;b=2"' in html


def test_render_page_escapes_text(tmp_path):
    write_theme(tmp_path, "<h1>{{ Config.Title }}</h1>")
    render_page(SiteConfig({"theme": "minimal", "Title": "<b>x</b>"}), tmp_path)
    html = (tmp_path / "index.html").read_text(encoding="utf-8")
    assert "&lt;b&gt;x&lt;/b&gt;" in html
    assert "<b>" not in html


def test_render_page_escapes_script_injection(tmp_path):
    write_theme(
        tmp_path,
        '<p title="{{ Config.bio }}">{{ Config.bio }}</p>'
        "<script>var name = {{ Config.bio|tojson }};</script>",
    )
    payload = "<script>alert(1)</script>"
    render_page(SiteConfig({"theme": "minimal", "bio": payload}), tmp_path)
    html = (tmp_path / "index.html").read_text(encoding="utf-8")
    assert payload not in html
    assert html.count("<script>") == 1
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html


def test_missing_template(tmp_path):
    config = SiteConfig({"theme": "ghost"})
    with pytest.raises(TemplateNotFound) as excinfo:
        render_page(config, tmp_path)
    assert str(tmp_path / "themes" / "ghost" / "index.html") in str(excinfo.value)
    assert not (tmp_path / "index.html").exists()


def test_template_syntax_error(tmp_path):
    write_theme(tmp_path, "line one\n{% if Config.Title %}unclosed")
    with pytest.raises(TemplateParseError) as excinfo:
        render_page(SiteConfig({"theme": "minimal", "Title": "x"}), tmp_path)
    assert excinfo.value.lineno == 2


def test_missing_field_is_fatal(tmp_path):
    write_theme(tmp_path, "<title>{{ Config.Nope }}</title>")
    with pytest.raises(TemplateExecError) as excinfo:
        render_page(SiteConfig({"theme": "minimal"}), tmp_path)
    assert "undefined field" in str(excinfo.value)


def test_missing_nested_field_is_fatal(tmp_path):
    write_theme(tmp_path, "{{ Config.profile.avatar }}")
    with pytest.raises(TemplateExecError):
        render_page(SiteConfig({"theme": "minimal", "profile": {"name": "x"}}), tmp_path)


def test_output_create_error(tmp_path):
    write_theme(tmp_path, "ok")
    (tmp_path / "index.html").mkdir()
    with pytest.raises(OutputCreateError):
        render_page(SiteConfig({"theme": "minimal"}), tmp_path)


def test_template_engine_binds_only_config(tmp_path):
    theme_dir = write_theme(tmp_path, "{{ Config.Title }}{{ data }}")
    engine = TemplateEngine(theme_dir)
    with pytest.raises(TemplateExecError):
        engine.render(SiteConfig({"theme": "minimal", "Title": "x"}))


def test_config_keys_shadowing_dict_methods_resolve_to_data(tmp_path):
    write_theme(
        tmp_path,
        "{% for item in Config.items %}{{ item.name }};{% endfor %}"
        "{{ Config.keys }}|{{ Config.get }}|{{ Config.values.first }}",
    )
    config = SiteConfig(
        {
            "theme": "minimal",
            "items": [{"name": "A"}, {"name": "B"}],
            "keys": "k",
            "get": "g",
            "values": {"first": "v"},
        }
    )
    render_page(config, tmp_path)
    assert (tmp_path / "index.html").read_text(encoding="utf-8") == "A;B;k|g|v"


@pytest.mark.parametrize(
    "template",
    ['{% include "secret.txt" %}', '{% extends "secret.txt" %}'],
)
def test_template_cannot_load_other_files(tmp_path, template):
    theme_dir = write_theme(tmp_path, template)
    (theme_dir / "secret.txt").write_text("OTHER FILE READ", encoding="utf-8")

    with pytest.raises(TemplateExecError) as excinfo:
        render_page(SiteConfig({"theme": "minimal"}), tmp_path)

    assert "secret.txt" in str(excinfo.value)
    assert not (tmp_path / "index.html").exists()
