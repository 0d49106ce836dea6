"""
Checklist Rendering.

Markdown to HTML for entry bodies, with optional checklist support.

Rendering happens in passes:

1. The body is converted with Python-Markdown, which knows nothing about
   checkboxes.
2. Every ``[x]`` / ``[ ]`` left in the HTML becomes a disabled checkbox
   input with a sequential id (``todo_0``, ``todo_1``, ...).
3. If any checkbox was produced, the HTML is repaired line by line: lists
   holding checkboxes get the ``todo`` class, and in strict mode a checkbox
   that opens a paragraph outside any list is removed again, since it came
   from stray bracket syntax rather than a checklist item.

Usage:
    from entrybook.backend.rendering.checklist import ChecklistMode, ChecklistRenderer

    renderer = ChecklistRenderer()
    html = renderer.render("- [x] milk\\n- [ ] eggs", ChecklistMode.FORCE)
"""

import re
from collections.abc import Mapping, Sequence
from enum import Enum
from html import escape

import markdown

from entrybook.backend.models.entry import Category

DEFAULT_EXTENSIONS = ("fenced_code", "tables")

CHECKBOX_PATTERN = re.compile(r"\[(x|\s)\]")
STRAY_CHECKBOX_PATTERN = re.compile(r'<p><input id="todo_(\d+)"')
LIST_OPEN_PATTERN = re.compile(r"<[uo]l[\s>]")
LIST_CLOSE_PATTERN = re.compile(r"</[uo]l>")
TODO_LIST_OPEN = "<ul class='todo'>"


class ChecklistMode(str, Enum):
    """How checkbox syntax in a body is treated."""

    FORCE = "force"
    AUTO = "auto"
    NONE = "none"


def render_markdown(text: str | None, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> str:
    """Convert markdown to HTML without any checkbox handling."""
    return markdown.markdown(text or "", extensions=list(extensions))


def checkbox_tag(
    index: int,
    checked: bool = False,
    disabled: bool = True,
    data: Mapping[str, str] | None = None,
) -> str:
    """Build the checkbox input for the checklist item at ``index``."""
    name = f"todo_{index}"
    attrs = [f'id="{name}"', f'name="{name}"', 'type="checkbox"', 'value=""']
    if checked:
        attrs.append('checked="checked"')
    if disabled:
        attrs.append('disabled="disabled"')
    for key, value in (data or {}).items():
        attrs.append(f'data-{escape(str(key))}="{escape(str(value))}"')
    return f"<input {' '.join(attrs)} />"


def synthesize_checkboxes(
    html: str,
    data: Mapping[str, str] | None = None,
) -> tuple[str, int]:
    """
    Replace bracket checkbox syntax with disabled checkbox inputs.

    Returns:
        Tuple of (html, number of checkboxes created)
    """
    counter = 0

    def _replace(match: re.Match[str]) -> str:
        nonlocal counter
        tag = checkbox_tag(counter, checked=match.group(1) == "x", data=data)
        counter += 1
        return tag

    return CHECKBOX_PATTERN.sub(_replace, html), counter


def repair_checklist_lines(
    lines: Sequence[str],
    strict: bool = True,
    data: Mapping[str, str] | None = None,
) -> list[str]:
    """
    Repair rendered HTML lines after checkbox synthesis.

    For each line, in this order:
    - an opening ``<ul>`` whose next line is an ``<li>`` and which has a
      checkbox on one of the next two lines gets the todo class;
    - in strict mode, a paragraph opening with a checkbox loses it, unless
      the paragraph sits inside a list (loose list items render as
      ``<li>`` followed by ``<p>``);
    - anything else is kept as is.
    """
    repaired = []
    depth = 0
    for idx, line in enumerate(lines):
        in_list = depth > 0
        depth += len(LIST_OPEN_PATTERN.findall(line)) - len(LIST_CLOSE_PATTERN.findall(line))

        if (
            idx + 2 < len(lines)
            and "<ul>" in line
            and "<li>" in lines[idx + 1]
            and ('type="checkbox"' in lines[idx + 1] or 'type="checkbox"' in lines[idx + 2])
        ):
            repaired.append(line.replace("<ul>", TODO_LIST_OPEN))
            continue

        match = STRAY_CHECKBOX_PATTERN.search(line) if strict and not in_list else None
        if match:
            index = int(match.group(1))
            for checked in (False, True):
                line = line.replace(checkbox_tag(index, checked=checked, data=data), "")

        repaired.append(line)
    return repaired


def render_checklist(
    text: str | None,
    strict: bool = True,
    data: Mapping[str, str] | None = None,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> str:
    """Render markdown and turn bracket syntax into a checklist."""
    html, created = synthesize_checkboxes(render_markdown(text, extensions), data)
    if not created:
        return html
    return "\n".join(repair_checklist_lines(html.split("\n"), strict, data))


class ChecklistRenderer:
    """Renders entry bodies according to a checklist mode."""

    def __init__(
        self,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        strict: bool = True,
    ) -> None:
        self.extensions = tuple(extensions)
        self.strict = strict

    def render(
        self,
        text: str | None,
        mode: ChecklistMode = ChecklistMode.AUTO,
        category: Category | None = None,
        data: Mapping[str, str] | None = None,
    ) -> str:
        """
        Render a body to HTML.

        FORCE always builds checkboxes, NONE never does, and AUTO only
        does for todo entries.
        """
        with_checkboxes = mode is ChecklistMode.FORCE or (
            mode is ChecklistMode.AUTO and category is Category.TODO
        )
        if with_checkboxes:
            return render_checklist(text, self.strict, data, self.extensions)
        return render_markdown(text, self.extensions)
