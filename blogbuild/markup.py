from __future__ import annotations

import re
from typing import Callable

import markdown

Lines = tuple[str, ...]

HEADING_CLASSES = {
    6: "text-sm font-semibold text-primary mt-4 mb-2",
    5: "text-base font-semibold text-primary mt-4 mb-2",
    4: "text-lg font-bold text-primary mt-6 mb-3",
    3: "text-xl font-bold text-primary mt-8 mb-4",
    2: "text-2xl font-bold text-primary mt-10 mb-4",
    1: "text-3xl font-bold text-primary mt-12 mb-6",
}
EM_CLASS = "text-accent"
BLOCKQUOTE_CLASS = "border-l-4 border-accent pl-4 my-6 italic text-gray-600"
LIST_CLASS = "space-y-2 text-gray-600 my-4"
LIST_ITEM_OPEN = '<li class="flex items-start gap-2">'
PARAGRAPH_OPEN = '<p class="text-gray-600 my-4">'
LINK_CLASS = "text-accent hover:underline"
IMAGE_CLASS = "rounded-lg my-6 w-full"

HEADING_RES = [(level, re.compile(rf"^{'#' * level} (.*)$")) for level in range(6, 0, -1)]
TRIPLE_EMPHASIS_RE = re.compile(r"\*\*\*(.*?)\*\*\*")
DOUBLE_EMPHASIS_RE = re.compile(r"\*\*(.*?)\*\*")
SINGLE_EMPHASIS_RE = re.compile(r"\*(.*?)\*")
BLOCKQUOTE_RE = re.compile(r"^> (.*)$")
LIST_ITEM_RE = re.compile(r"^- (.*)$")
MARKUP_TAG_RE = re.compile(r"^</?[a-z][a-z0-9]*\b", re.IGNORECASE)
IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")


def render_headers(lines: Lines) -> Lines:
    out = []
    for line in lines:
        for level, pattern in HEADING_RES:
            match = pattern.match(line)
            if match:
                line = f'<h{level} class="{HEADING_CLASSES[level]}">{match.group(1)}</h{level}>'
                break
        out.append(line)
    return tuple(out)


def render_emphasis(lines: Lines) -> Lines:
    out = []
    for line in lines:
        line = TRIPLE_EMPHASIS_RE.sub(r"<strong><em>\1</em></strong>", line)
        line = DOUBLE_EMPHASIS_RE.sub(r"<strong>\1</strong>", line)
        line = SINGLE_EMPHASIS_RE.sub(rf'<em class="{EM_CLASS}">\1</em>', line)
        out.append(line)
    return tuple(out)


def render_blockquotes(lines: Lines) -> Lines:
    return tuple(
        BLOCKQUOTE_RE.sub(rf'<blockquote class="{BLOCKQUOTE_CLASS}">\1</blockquote>', line) for line in lines
    )


def render_list_items(lines: Lines) -> Lines:
    replacement = rf'{LIST_ITEM_OPEN}<span class="{EM_CLASS}">•</span><span>\1</span></li>'
    return tuple(LIST_ITEM_RE.sub(replacement, line) for line in lines)


def is_list_item(line: str) -> bool:
    return line.startswith(LIST_ITEM_OPEN) and line.endswith("</li>")


def wrap_lists(lines: Lines) -> Lines:
    out = list(lines)
    for i, line in enumerate(lines):
        if not is_list_item(line):
            continue
        if i == 0 or not is_list_item(lines[i - 1]):
            out[i] = f'<ul class="{LIST_CLASS}">{out[i]}'
        if i == len(lines) - 1 or not is_list_item(lines[i + 1]):
            out[i] = f"{out[i]}</ul>"
    return tuple(out)


def wrap_paragraphs(lines: Lines) -> Lines:
    out = []
    for line in lines:
        stripped = line.strip()
        if not stripped or MARKUP_TAG_RE.match(stripped) or "</li>" in stripped or "</ul>" in stripped:
            out.append(line)
            continue
        out.append(f"{PARAGRAPH_OPEN}{stripped}</p>")
    return tuple(out)


def drop_empty_paragraphs(lines: Lines) -> Lines:
    return tuple(line.replace(f"{PARAGRAPH_OPEN}</p>", "") for line in lines)


def render_links_and_images(lines: Lines) -> Lines:
    out = []
    for line in lines:
        line = IMAGE_RE.sub(rf'<img src="\2" alt="\1" class="{IMAGE_CLASS}" />', line)
        line = LINK_RE.sub(rf'<a href="\2" class="{LINK_CLASS}">\1</a>', line)
        out.append(line)
    return tuple(out)


# Order matters: each pass relies on the shape left by the ones before it.
PASSES: tuple[Callable[[Lines], Lines], ...] = (
    render_headers,
    render_emphasis,
    render_blockquotes,
    render_list_items,
    wrap_lists,
    wrap_paragraphs,
    drop_empty_paragraphs,
    render_links_and_images,
)


def render_basic(text: str) -> str:
    lines: Lines = tuple(text.replace("\r\n", "\n").split("\n"))
    for render_pass in PASSES:
        lines = render_pass(lines)
    return "\n".join(lines)


def normalize_list_spacing(text: str) -> str:
    lines = text.replace("\r\n", "\n").split("\n")
    out: list[str] = []
    in_fence = False
    fence_marker = ""
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            out.append(line)
            continue
        if in_fence:
            out.append(line)
            continue
        list_match = LIST_MARKER_RE.match(line)
        if list_match and not list_match.group("indent"):
            if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                out.append("")
        out.append(line)
    return "\n".join(out)


def render_python_markdown(text: str) -> str:
    md = markdown.Markdown(
        extensions=["fenced_code", "tables", "codehilite"],
        extension_configs={"codehilite": {"guess_lang": False}},
    )
    return md.convert(normalize_list_spacing(text))


ENGINES: dict[str, Callable[[str], str]] = {
    "basic": render_basic,
    "markdown": render_python_markdown,
}


def render_markdown(text: str, engine: str = "basic") -> str:
    try:
        render = ENGINES[engine]
    except KeyError:
        raise ValueError(f"Unknown markdown engine: {engine}") from None
    return render(text)
