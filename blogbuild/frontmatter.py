from __future__ import annotations

from .errors import FormatError

DELIMITER = "---"
SCALAR_FIELDS = (
    "title",
    "slug",
    "excerpt",
    "featuredImage",
    "category",
    "publishDate",
    "author",
)
LIST_ITEM_PREFIX = "- "


def split_front_matter(text: str) -> tuple[list[str], str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.replace("\r\n", "\n").split("\n")
    if not lines or lines[0].strip() != DELIMITER:
        raise FormatError("Invalid frontmatter format")

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            end = i
            break
    if end is None:
        raise FormatError("Invalid frontmatter format")

    body = "\n".join(lines[end + 1 :])
    return lines[1:end], body.strip()


def parse_header(lines: list[str]) -> dict:
    meta: dict = {}
    list_key = None
    items: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue

        is_item = stripped.startswith(LIST_ITEM_PREFIX)
        if list_key is not None:
            if is_item:
                items.append(stripped[len(LIST_ITEM_PREFIX) :].strip())
                continue
            meta[list_key] = items
            list_key = None
            items = []
        if is_item:
            continue

        if ":" not in stripped:
            continue
        key, value = stripped.split(":", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if value:
            meta[key] = value
        else:
            # An empty value opens a list; it stays empty if no items follow.
            list_key = key
            items = []

    if list_key is not None:
        meta[list_key] = items
    return meta


def parse_front_matter(text: str) -> tuple[dict, str]:
    header, body = split_front_matter(text)
    meta = parse_header(header)
    if not isinstance(meta.get("tags"), list):
        meta["tags"] = []
    for key in (*SCALAR_FIELDS, "subtitle"):
        if meta.get(key) == []:
            meta[key] = ""
    return meta, body
