from pathlib import Path

import pytest

from blogbuild.codegen import (
    generate,
    is_generated,
    is_reserved_slug,
    list_generated_slugs,
    module_filename,
    render_article_module,
    render_index_module,
    symbol_name,
)
from blogbuild.loader import load_article, load_articles


def make_article(slug: str, category: str = "News", tags: list[str] | None = None, html: str = "<p>x</p>") -> dict:
    meta = {
        "title": slug.title(),
        "slug": slug,
        "excerpt": "",
        "featuredImage": "",
        "category": category,
        "publishDate": "2024-01-01",
        "author": "A",
        "tags": tags if tags is not None else [],
    }
    return {"slug": slug, "meta": meta, "html": html, "source": Path("blog-content") / f"{slug}.md"}


def test_scalar_fields_and_content_round_trip_through_python_module(site, import_generated) -> None:
    path = site["content"] / "tricky.md"
    path.write_text(
        "---\n"
        'title: She said "hi" \\ then left\n'
        "slug: tricky-one\n"
        "excerpt: Ünïcödé & <tags> {braces}\n"
        "featuredImage: https://cdn.test/a.png\n"
        "category: Faith & Family\n"
        "publishDate: May 1st, 2024\n"
        "author: O'Brien\n"
        "subtitle: Sub `tick` ${x}\n"
        "tags:\n"
        "  - zeta\n"
        "  - alpha\n"
        "---\n"
        'Quote """ and \\n backslash `tick` ${var}\n',
        encoding="utf-8",
    )
    article = load_article(path)

    generate([article], site["output"])
    module = import_generated(site["output"])
    post = module.get_blog_post("tricky-one")

    for key in ("title", "slug", "excerpt", "featuredImage", "category", "publishDate", "author", "subtitle"):
        assert post[key] == article["meta"][key]
    assert post["title"] == 'She said "hi" \\ then left'
    assert post["tags"] == ["zeta", "alpha"]
    assert post["content"] == article["html"]


def test_python_index_exposes_listing_lookup_and_vocabularies(site, import_generated) -> None:
    articles = [
        make_article("hello-world", "Faith", ["faith", "family"], "<p>hello</p>"),
        make_article("second-post", "Community", ["faith"]),
        make_article("third-post", "Faith", ["community"]),
    ]
    generate(articles, site["output"])
    module = import_generated(site["output"])

    assert list(module.blog_posts) == ["hello-world", "second-post", "third-post"]
    assert [meta["slug"] for meta in module.blog_posts_meta] == ["hello-world", "second-post", "third-post"]
    assert all("content" not in meta for meta in module.blog_posts_meta)
    assert module.get_blog_post("hello-world")["content"] == "<p>hello</p>"
    assert module.get_blog_post("missing") is None
    assert module.get_all_categories() == ["Community", "Faith"]
    assert module.get_all_tags() == ["community", "faith", "family"]


def test_empty_set_writes_an_explicitly_empty_index(site, import_generated) -> None:
    written, removed = generate([], site["output"])

    assert written == [site["output"] / "__init__.py"]
    assert removed == []
    module = import_generated(site["output"])
    assert module.blog_posts == {}
    assert module.blog_posts_meta == []
    assert module.get_all_categories() == []
    assert module.get_all_tags() == []
    assert module.get_blog_post("anything") is None


def test_output_is_deterministic(site) -> None:
    articles = [make_article("a-post", tags=["x"]), make_article("b-post")]
    generate(articles, site["output"])
    first = {path.name: path.read_bytes() for path in site["output"].iterdir()}
    generate(articles, site["output"])
    second = {path.name: path.read_bytes() for path in site["output"].iterdir()}
    assert first == second


def test_stale_generated_modules_are_pruned_but_hand_written_files_kept(site) -> None:
    generate([make_article("old-post"), make_article("new-post")], site["output"])
    helper = site["output"] / "helpers.py"
    helper.write_text("VALUE = 1\n", encoding="utf-8")

    written, removed = generate([make_article("new-post")], site["output"])

    assert removed == [site["output"] / "old_post.py"]
    assert not (site["output"] / "old_post.py").exists()
    assert helper.exists()
    assert list_generated_slugs(site["output"]) == ["new-post"]


def test_subtitle_only_emitted_when_present() -> None:
    article = make_article("plain")
    assert '"subtitle"' not in render_article_module(article)
    article["meta"]["subtitle"] = "More"
    assert '"subtitle": "More",' in render_article_module(article)


def test_article_module_header_marks_it_generated(site) -> None:
    generate([make_article("hello-world")], site["output"])
    path = site["output"] / "hello_world.py"
    lines = path.read_text(encoding="utf-8").splitlines()

    assert lines[:3] == [
        "# Auto-generated - DO NOT EDIT",
        "# Generated by: blogbuild",
        "# Source: blog-content/hello-world.md",
    ]
    assert is_generated(path)


def test_typescript_target(site) -> None:
    articles = [make_article("hello-world", tags=["faith"], html="a `tick` ${x} \\ end")]
    written, _ = generate(articles, site["output"], target="typescript", types_import="@/types/blog")

    assert sorted(path.name for path in written) == ["hello-world.ts", "index.ts"]
    module = (site["output"] / "hello-world.ts").read_text(encoding="utf-8")
    assert module.startswith("// Auto-generated - DO NOT EDIT\n")
    assert "import type { BlogPost } from '@/types/blog'" in module
    assert "export const helloWorld: BlogPost = {" in module
    assert '  tags: ["faith"],' in module
    assert "  content: `a \\`tick\\` \\${x} \\\\ end`," in module
    assert module.endswith("export default helloWorld\n")

    index = (site["output"] / "index.ts").read_text(encoding="utf-8")
    assert "import { helloWorld } from './hello-world'" in index
    assert "  'hello-world': helloWorld," in index
    assert "export function getAllTags(): string[] {" in index
    assert list_generated_slugs(site["output"], "typescript") == ["hello-world"]


def test_empty_typescript_index() -> None:
    index = render_index_module([], "typescript")
    assert "export const blogPosts: Record<string, BlogPost> = {}" in index
    assert "export const blogPostsMeta: BlogPostMeta[] = []" in index


@pytest.mark.parametrize(
    ("slug", "target", "filename", "symbol"),
    [
        ("hello-world", "python", "hello_world.py", "hello_world"),
        ("hello-world", "typescript", "hello-world.ts", "helloWorld"),
        ("post-2024", "typescript", "post-2024.ts", "post_2024"),
    ],
)
def test_module_and_symbol_names(slug: str, target: str, filename: str, symbol: str) -> None:
    assert module_filename(slug, target) == filename
    assert symbol_name(slug, target) == symbol


def test_unknown_target_is_rejected(site) -> None:
    with pytest.raises(ValueError, match="Unknown target"):
        generate([], site["output"], target="ruby")


def test_tags_vocabulary_scenario(site, write_article, import_generated) -> None:
    write_article("hello-world", tags=("faith", "family"))
    write_article("second", tags=("faith",))
    write_article("third", tags=("community",))
    articles = load_articles(sorted(site["content"].glob("*.md")))

    generate(articles, site["output"])

    assert import_generated(site["output"]).get_all_tags() == ["community", "faith", "family"]


@pytest.mark.parametrize("slug", ["sorted", "blog-posts", "get-blog-post", "delete", "default", "null", "new"])
def test_slugs_clashing_with_index_names_are_refused(site, slug: str) -> None:
    assert is_reserved_slug(slug)
    with pytest.raises(ValueError, match="Reserved article slugs"):
        generate([make_article(slug), make_article("other")], site["output"], target="typescript")
    assert not site["output"].exists()


def test_builtin_lookalike_slugs_keep_the_index_working(site, import_generated) -> None:
    assert not is_reserved_slug("sorted-posts")
    generate([make_article("sorted-posts", "B", ["y"]), make_article("list", "A", ["x"])], site["output"])

    module = import_generated(site["output"])

    assert module.get_all_categories() == ["A", "B"]
    assert module.get_all_tags() == ["x", "y"]
