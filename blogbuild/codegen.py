from __future__ import annotations

import json
import keyword
import re
from pathlib import Path

MARKER = "Auto-generated - DO NOT EDIT"
GENERATOR = "blogbuild"
TARGETS = ("python", "typescript")
DEFAULT_TYPES_IMPORT = "../../types/blog"
META_FIELDS = ("title", "slug", "excerpt", "featuredImage", "category", "publishDate", "author", "tags")

SUFFIXES = {"python": ".py", "typescript": ".ts"}
INDEX_NAMES = {"python": "__init__.py", "typescript": "index.ts"}
COMMENT_PREFIXES = {"python": "#", "typescript": "//"}

# Names the generated index defines or looks up, per target. Article symbols
# share the index namespace, so a slug mapping onto one of these is refused.
RESERVED_SYMBOLS = {
    "python": frozenset(
        {
            *keyword.kwlist,
            "sorted",
            "blog_posts",
            "blog_posts_meta",
            "get_blog_post",
            "get_all_categories",
            "get_all_tags",
        }
    ),
    "typescript": frozenset(
        {
            "arguments", "await", "break", "case", "catch", "class", "const", "continue",
            "debugger", "default", "delete", "do", "else", "enum", "eval", "export",
            "extends", "false", "finally", "for", "function", "if", "implements",
            "import", "in", "instanceof", "interface", "let", "new", "null", "package",
            "private", "protected", "public", "return", "static", "super", "switch",
            "this", "throw", "true", "try", "typeof", "undefined", "var", "void",
            "while", "with", "yield",
            "blogPosts", "blogPostsMeta", "getBlogPost", "getAllCategories", "getAllTags",
        }
    ),
}


def check_target(target: str) -> None:
    if target not in TARGETS:
        raise ValueError(f"Unknown target: {target} (expected one of {', '.join(TARGETS)})")


def is_reserved_slug(slug: str) -> bool:
    return any(symbol_name(slug, target) in RESERVED_SYMBOLS[target] for target in TARGETS)


def symbol_name(slug: str, target: str) -> str:
    if target == "typescript":
        name = re.sub(r"-([a-z])", lambda m: m.group(1).upper(), slug)
        return name.replace("-", "_")
    return slug.replace("-", "_")


def module_filename(slug: str, target: str) -> str:
    check_target(target)
    stem = slug.replace("-", "_") if target == "python" else slug
    return f"{stem}{SUFFIXES[target]}"


def index_filename(target: str) -> str:
    check_target(target)
    return INDEX_NAMES[target]


def slug_from_filename(name: str, target: str) -> str:
    stem = name[: -len(SUFFIXES[target])]
    return stem.replace("_", "-") if target == "python" else stem


def literal(value: object) -> str:
    return json.dumps(value, ensure_ascii=False)


def escape_python_block(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\r", "\\r")


def escape_template_literal(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def header(target: str, source: str = "") -> str:
    prefix = COMMENT_PREFIXES[target]
    lines = [f"{prefix} {MARKER}", f"{prefix} Generated by: {GENERATOR}"]
    if source:
        lines.append(f"{prefix} Source: {source}")
    return "\n".join(lines) + "\n"


def source_label(article: dict) -> str:
    source = article.get("source")
    if not source:
        return ""
    source = Path(source)
    return f"{source.parent.name}/{source.name}"


def meta_lines(meta: dict, target: str, indent: str) -> list[str]:
    lines = []
    for key in META_FIELDS:
        value = meta.get(key, [] if key == "tags" else "")
        if target == "python":
            lines.append(f"{indent}{literal(key)}: {literal(value)},")
        else:
            lines.append(f"{indent}{key}: {literal(value)},")
    subtitle = meta.get("subtitle")
    if subtitle:
        key = literal("subtitle") if target == "python" else "subtitle"
        lines.append(f"{indent}{key}: {literal(subtitle)},")
    return lines


def render_article_module(article: dict, target: str = "python", types_import: str = DEFAULT_TYPES_IMPORT) -> str:
    check_target(target)
    name = symbol_name(article["slug"], target)
    fields = meta_lines(article["meta"], target, "    " if target == "python" else "  ")
    if target == "python":
        body = [
            f"{name} = {{",
            *fields,
            f'    "content": """{escape_python_block(article["html"])}""",',
            "}",
        ]
    else:
        body = [
            f"import type {{ BlogPost }} from '{types_import}'",
            "",
            f"export const {name}: BlogPost = {{",
            *fields,
            f"  content: `{escape_template_literal(article['html'])}`,",
            "}",
            "",
            f"export default {name}",
        ]
    return header(target, source_label(article)) + "\n" + "\n".join(body) + "\n"


def render_python_index(articles: list[dict]) -> str:
    lines = []
    for article in articles:
        name = symbol_name(article["slug"], "python")
        lines.append(f"from .{name} import {name}")
    if lines:
        lines.append("")

    lines.append("# All blog posts with full content")
    if articles:
        lines.append("blog_posts = {")
        for article in articles:
            lines.append(f"    {literal(article['slug'])}: {symbol_name(article['slug'], 'python')},")
        lines.append("}")
    else:
        lines.append("blog_posts = {}")
    lines.append("")

    lines.append("# Blog posts metadata only (for listing pages)")
    if articles:
        lines.append("blog_posts_meta = [")
        for article in articles:
            lines.append("    {")
            lines.extend(meta_lines(article["meta"], "python", "        "))
            lines.append("    },")
        lines.append("]")
    else:
        lines.append("blog_posts_meta = []")

    lines.extend(
        [
            "",
            "",
            "def get_blog_post(slug):",
            "    return blog_posts.get(slug)",
            "",
            "",
            "def get_all_categories():",
            '    return sorted({post["category"] for post in blog_posts_meta})',
            "",
            "",
            "def get_all_tags():",
            '    return sorted({tag for post in blog_posts_meta for tag in post["tags"]})',
        ]
    )
    return header("python") + "\n" + "\n".join(lines) + "\n"


def render_typescript_index(articles: list[dict], types_import: str = DEFAULT_TYPES_IMPORT) -> str:
    lines = [f"import type {{ BlogPostMeta, BlogPost }} from '{types_import}'", ""]
    for article in articles:
        lines.append(f"import {{ {symbol_name(article['slug'], 'typescript')} }} from './{article['slug']}'")
    if articles:
        lines.append("")

    lines.append("// All blog posts with full content")
    if articles:
        lines.append("export const blogPosts: Record<string, BlogPost> = {")
        for article in articles:
            lines.append(f"  '{article['slug']}': {symbol_name(article['slug'], 'typescript')},")
        lines.append("}")
    else:
        lines.append("export const blogPosts: Record<string, BlogPost> = {}")
    lines.append("")

    lines.append("// Blog posts metadata only (for listing pages)")
    if articles:
        lines.append("export const blogPostsMeta: BlogPostMeta[] = [")
        for article in articles:
            lines.append("  {")
            lines.extend(meta_lines(article["meta"], "typescript", "    "))
            lines.append("  },")
        lines.append("]")
    else:
        lines.append("export const blogPostsMeta: BlogPostMeta[] = []")

    lines.extend(
        [
            "",
            "// Get a single blog post by slug",
            "export function getBlogPost(slug: string): BlogPost | undefined {",
            "  return blogPosts[slug]",
            "}",
            "",
            "// Get all categories",
            "export function getAllCategories(): string[] {",
            "  const categories = new Set(blogPostsMeta.map((post) => post.category))",
            "  return Array.from(categories).sort()",
            "}",
            "",
            "// Get all tags",
            "export function getAllTags(): string[] {",
            "  const tags = new Set(blogPostsMeta.flatMap((post) => post.tags))",
            "  return Array.from(tags).sort()",
            "}",
            "",
            "export default blogPosts",
        ]
    )
    return header("typescript") + "\n" + "\n".join(lines) + "\n"


def render_index_module(articles: list[dict], target: str = "python", types_import: str = DEFAULT_TYPES_IMPORT) -> str:
    check_target(target)
    if target == "python":
        return render_python_index(articles)
    return render_typescript_index(articles, types_import)


def is_generated(path: Path) -> bool:
    try:
        with path.open(encoding="utf-8") as handle:
            first_line = handle.readline()
    except UnicodeDecodeError:
        return False
    return MARKER in first_line


def list_generated_slugs(output_dir: Path, target: str = "python") -> list[str]:
    check_target(target)
    if not output_dir.is_dir():
        return []
    suffix = SUFFIXES[target]
    slugs = []
    for path in sorted(output_dir.iterdir(), key=lambda p: p.name):
        if not path.is_file() or path.suffix != suffix or path.name == INDEX_NAMES[target]:
            continue
        if is_generated(path):
            slugs.append(slug_from_filename(path.name, target))
    return slugs


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def generate(
    articles: list[dict],
    output_dir: Path,
    target: str = "python",
    types_import: str = DEFAULT_TYPES_IMPORT,
) -> tuple[list[Path], list[Path]]:
    check_target(target)
    slugs = [article["slug"] for article in articles]
    if len(set(slugs)) != len(slugs):
        raise ValueError("Article slugs must be unique")
    reserved = [slug for slug in slugs if is_reserved_slug(slug)]
    if reserved:
        raise ValueError(f"Reserved article slugs: {', '.join(reserved)}")

    outputs: dict[Path, str] = {}
    for article in articles:
        outputs[output_dir / module_filename(article["slug"], target)] = render_article_module(
            article, target, types_import
        )
    outputs[output_dir / index_filename(target)] = render_index_module(articles, target, types_import)

    written = []
    for path, text in outputs.items():
        write_text(path, text)
        written.append(path)

    removed = []
    keep = set(slugs)
    for slug in list_generated_slugs(output_dir, target):
        if slug not in keep:
            path = output_dir / module_filename(slug, target)
            path.unlink()
            removed.append(path)
    return written, removed
