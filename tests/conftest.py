"""Shared fixtures: a template directory on disk and a store over it."""

from pathlib import Path

import pytest

from wren.templating.store import TemplateStore

TEMPLATES: dict[str, str] = {
    "todos/list.html": """\
<!DOCTYPE html>
<html>
<head><title>{{ title }}</title></head>
<body>
<h1>{{ title }}</h1>
<ul id="todos-list">
{% block todos_list %}
{% if items %}
{% for item in items %}
<li>{{ item.text }}</li>
{% end %}
{% else %}
<li class="empty">No todos</li>
{% end %}
{% end %}
</ul>
<p id="summary">{% block summary %}{{ items | length }} items{% end %}</p>
</body>
</html>
""",
    "page.html": """\
<html>
<body>
<h1>{{ title }}</h1>
<div id="content">{% block content %}<p>{{ body }}</p>{% end %}</div>
</body>
</html>
""",
    "rows.html": """\
{% block row %}<li id="row-{{ row.id }}">{{ row.name }}</li>{% end %}
""",
    "strict.html": "<p>{{ missing_value }}</p>\n",
    "broken.html": "<p>{% if %}</p>\n",
}


def write_templates(root: Path, templates: dict[str, str] | None = None) -> Path:
    """Write *templates* (default: the shared set) under *root*."""
    for name, source in (templates or TEMPLATES).items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
    return root


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    return write_templates(tmp_path / "templates")


@pytest.fixture
def store(template_dir: Path) -> TemplateStore:
    return TemplateStore(template_dir)
