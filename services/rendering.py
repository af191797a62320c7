# services/rendering.py
import re
from pathlib import Path
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

# Labeled answer lines and how they are shown; None drops the line.
ANSWER_LABELS = (
    (re.compile(r"^\s*學生名[稱称]\s*[:：]\s*"), "👤 學生："),
    (re.compile(r"^\s*[學学]科\s*[:：]\s*"), "📚 學科："),
    (re.compile(r"^\s*主[題题]\s*[:：]\s*"), "📖 主題："),
    (re.compile(r"^\s*問題\s*[:：]"), None),
    (re.compile(r"^\s*回覆\s*[:：]\s*"), "💡 解答："),
)


def format_answer(text: str) -> Markup:
    lines = []
    for line in (text or "").replace("\\n", "\n").split("\n"):
        for pattern, heading in ANSWER_LABELS:
            match = pattern.match(line)
            if match:
                if heading is not None:
                    lines.append(Markup("<strong>{}</strong>{}").format(heading, line[match.end():]))
                break
        else:
            lines.append(escape(line))
    return Markup("<br>").join(lines)


def format_text(text: str) -> Markup:
    return Markup("<br>").join(escape(line) for line in (text or "").split("\n"))


environment = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)
environment.filters["answer"] = format_answer
environment.filters["text"] = format_text


def render(page: str, data: dict = None) -> str:
    """Render templates/<page>.html with a plain dict as its context."""
    return environment.get_template(f"{page}.html").render(data or {})
