from __future__ import annotations

import importlib.util
import sys
import uuid
from pathlib import Path

import pytest


def article_text(
    slug: str,
    title: str = "Untitled",
    category: str = "News",
    tags: tuple[str, ...] = ("faith",),
    body: str = "Body text.",
    **extra: str,
) -> str:
    lines = [
        "---",
        f"title: {title}",
        f"slug: {slug}",
        "excerpt: Short summary",
        "featuredImage: images/cover.jpg",
        f"category: {category}",
        "publishDate: 2024-05-01",
        "author: Jane Doe",
        "tags:",
    ]
    lines.extend(f"  - {tag}" for tag in tags)
    lines.extend(f"{key}: {value}" for key, value in extra.items())
    lines.append("---")
    lines.append(body)
    return "\n".join(lines) + "\n"


@pytest.fixture
def site(tmp_path: Path) -> dict:
    content = tmp_path / "blog-content"
    content.mkdir()
    return {
        "root": tmp_path,
        "content": content,
        "images": content / "images",
        "output": tmp_path / "data" / "blog_data",
        "public_images": tmp_path / "public" / "images" / "blog",
    }


@pytest.fixture
def write_article(site: dict):
    def _write(slug: str, filename: str = "", **fields) -> Path:
        path = site["content"] / (filename or f"{slug}.md")
        path.write_text(article_text(slug, **fields), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def cli_args(site: dict) -> list[str]:
    return [
        "--config",
        str(site["root"] / "missing.toml"),
        "--content",
        str(site["content"]),
        "--output",
        str(site["output"]),
        "--public-images",
        str(site["public_images"]),
    ]


@pytest.fixture
def import_generated(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(sys, "dont_write_bytecode", True)
    names = []

    def _import(output_dir: Path):
        name = f"generated_{uuid.uuid4().hex}"
        spec = importlib.util.spec_from_file_location(
            name, output_dir / "__init__.py", submodule_search_locations=[str(output_dir)]
        )
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        names.append(name)
        spec.loader.exec_module(module)
        return module

    yield _import
    for name in names:
        for key in [key for key in sys.modules if key == name or key.startswith(f"{name}.")]:
            del sys.modules[key]
