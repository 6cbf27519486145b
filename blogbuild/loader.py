from __future__ import annotations

import re
from pathlib import Path

from .codegen import is_reserved_slug
from .errors import FormatError
from .frontmatter import SCALAR_FIELDS, parse_front_matter
from .markup import render_markdown

SLUG_RE = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")
IMG_SRC_RE = re.compile(r'<img([^>]*?)src="([^"]+)"', re.IGNORECASE)

DEFAULT_IMAGE_PREFIX = "images/"
DEFAULT_PUBLIC_IMAGE_PATH = "/images/blog/"


def slugify(text: str) -> str:
    text = text.lower()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return text.strip("-")


def is_valid_slug(slug: str) -> bool:
    return bool(SLUG_RE.match(slug)) and not is_reserved_slug(slug)


def list_article_files(content_dir: Path) -> list[Path]:
    if not content_dir.is_dir():
        return []
    return sorted((path for path in content_dir.glob("*.md") if path.is_file()), key=lambda p: p.name)


def rewrite_image_path(value: str, image_prefix: str, public_image_path: str) -> str:
    if not image_prefix or not value.startswith(image_prefix):
        return value
    return public_image_path.rstrip("/") + "/" + value[len(image_prefix) :]


def rewrite_image_src(html_text: str, image_prefix: str, public_image_path: str) -> str:
    def repl(match: re.Match) -> str:
        src = rewrite_image_path(match.group(2), image_prefix, public_image_path)
        return f'<img{match.group(1)}src="{src}"'

    return IMG_SRC_RE.sub(repl, html_text)


def load_article(
    path: Path,
    image_prefix: str = DEFAULT_IMAGE_PREFIX,
    public_image_path: str = DEFAULT_PUBLIC_IMAGE_PATH,
    engine: str = "basic",
) -> dict:
    try:
        raw_text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(f"{path.name}: not valid UTF-8") from exc
    try:
        meta, body = parse_front_matter(raw_text)
    except FormatError as exc:
        raise FormatError(f"{path.name}: {exc}") from exc

    explicit_slug = str(meta.get("slug") or "").strip()
    slug = explicit_slug or slugify(path.stem)
    if not is_valid_slug(slug):
        raise FormatError(
            f"{path.name}: invalid slug {slug!r} "
            "(use lowercase letters, digits and single hyphens, starting with a letter; "
            "reserved names are not allowed)"
        )
    meta["slug"] = slug

    for key in SCALAR_FIELDS:
        value = meta.get(key)
        if value is None:
            meta[key] = ""
        elif not isinstance(value, str):
            raise FormatError(f"{path.name}: field {key!r} must be a single value")
    if not isinstance(meta.get("subtitle", ""), str):
        raise FormatError(f"{path.name}: field 'subtitle' must be a single value")

    meta["featuredImage"] = rewrite_image_path(meta["featuredImage"], image_prefix, public_image_path)
    html_content = render_markdown(body, engine)
    html_content = rewrite_image_src(html_content, image_prefix, public_image_path)
    return {"slug": slug, "meta": meta, "html": html_content, "source": path}


def load_articles(
    paths: list[Path],
    image_prefix: str = DEFAULT_IMAGE_PREFIX,
    public_image_path: str = DEFAULT_PUBLIC_IMAGE_PATH,
    engine: str = "basic",
) -> list[dict]:
    articles = []
    seen: dict[str, Path] = {}
    for path in paths:
        article = load_article(path, image_prefix, public_image_path, engine)
        slug = article["slug"]
        if slug in seen:
            raise FormatError(f"Duplicate slug {slug!r} in {seen[slug].name} and {path.name}")
        seen[slug] = path
        articles.append(article)
    return articles
