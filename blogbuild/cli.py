from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from . import console
from .assets import sync_images
from .codegen import (
    DEFAULT_TYPES_IMPORT,
    TARGETS,
    generate,
    index_filename,
    is_generated,
    list_generated_slugs,
    module_filename,
)
from .config import DEFAULT_CONFIG, load_config
from .console import PromptProvider
from .errors import BlogBuildError, NotFoundError
from .loader import (
    DEFAULT_IMAGE_PREFIX,
    DEFAULT_PUBLIC_IMAGE_PATH,
    is_valid_slug,
    list_article_files,
    load_article,
    load_articles,
)
from .markup import ENGINES

BUILD_ALL = "all"


def images_dir(args: argparse.Namespace) -> Path:
    if args.images:
        return Path(args.images)
    return Path(args.content) / "images"


def read_articles(args: argparse.Namespace, paths: list[Path]) -> list[dict]:
    return load_articles(paths, args.image_prefix, args.public_image_path, args.renderer)


def write_output(args: argparse.Namespace, articles: list[dict]) -> None:
    written, removed = generate(articles, Path(args.output), args.target, args.types_import)
    index_name = index_filename(args.target)
    for path in written:
        if path.name == index_name and not articles:
            console.success(f"  Generated: {path.name} (empty)")
        else:
            console.success(f"  Generated: {path.name}")
    for path in removed:
        console.warning(f"  Removed stale: {path.name}")


def copy_images(args: argparse.Namespace) -> None:
    source = images_dir(args)
    if not source.is_dir():
        console.warning("No images directory found, skipping image copy")
        return
    for name in sync_images(source, Path(args.public_images)):
        console.info(f"  Copied: {name}")


def find_source(files: list[Path], slug: str) -> Path:
    for path in files:
        if path.stem == slug:
            return path
    raise NotFoundError(f"Article not found: {slug}")


def build(args: argparse.Namespace, target: str = BUILD_ALL) -> None:
    console.blank()
    console.heading("Starting blog build...")
    console.blank()

    content_dir = Path(args.content)
    if not content_dir.is_dir():
        console.warning(f"Blog content directory not found: {content_dir}")
    files = list_article_files(content_dir)
    source = find_source(files, target) if target != BUILD_ALL else None

    console.heading("Processing markdown files...")
    if source is None:
        if not files:
            console.warning("No markdown files found, writing an empty index")
        for path in files:
            console.info(f"  Reading: {path.name}")
        articles = read_articles(args, files)
    else:
        console.info(f"  Reading: {source.name}")
        article = load_article(source, args.image_prefix, args.public_image_path, args.renderer)
        index_path = Path(args.output) / index_filename(args.target)
        if index_path.exists():
            # The index always reflects every article on disk.
            articles = read_articles(args, files)
        else:
            articles = [article]

    console.blank()
    console.heading("Copying images...")
    copy_images(args)

    console.blank()
    console.heading("Generating data modules...")
    write_output(args, articles)
    console.banner("Build completed successfully!", "success")


def delete_article(args: argparse.Namespace, slug: str) -> None:
    if not is_valid_slug(slug):
        raise NotFoundError(f"Article not found: {slug}")
    output_dir = Path(args.output)
    module_path = output_dir / module_filename(slug, args.target)
    if not module_path.is_file() or not is_generated(module_path):
        raise NotFoundError(f"Article not found: {slug}")

    files = list_article_files(Path(args.content))
    remaining = [article for article in read_articles(args, files) if article["slug"] != slug]

    module_path.unlink()
    console.warning(f"  Deleted: {module_path.name}")
    write_output(args, remaining)
    console.banner("Article deleted successfully!", "success")


def show_choices(title: str, level: str, label: str, slugs: list[str]) -> None:
    console.banner(title, level)
    console.heading(label)
    for i, slug in enumerate(slugs, start=1):
        console.info(f"  {i}. {slug}")
    console.blank()


def pick_slug(answer: str, slugs: list[str]) -> Optional[str]:
    if answer.isdigit():
        index = int(answer) - 1
        if 0 <= index < len(slugs):
            return slugs[index]
        console.error(f"Invalid number. Please enter 1-{len(slugs)}")
        return None
    if answer in slugs:
        return answer
    console.error(f"Article not found: {answer}")
    return None


def prompt_build_target(args: argparse.Namespace, prompt: PromptProvider = console.ask) -> str:
    files = list_article_files(Path(args.content))
    if not files:
        raise NotFoundError(f"No markdown files found in {args.content}")
    slugs = [path.stem for path in files]
    show_choices("Blog Build Script", "info", "Available articles:", slugs)
    while True:
        answer = prompt("Build [A]ll articles or enter article number/slug: ").strip().lower()
        if answer in {"", "a", "all"}:
            return BUILD_ALL
        slug = pick_slug(answer, slugs)
        if slug:
            return slug


def prompt_delete(args: argparse.Namespace, prompt: PromptProvider = console.ask) -> Optional[str]:
    slugs = list_generated_slugs(Path(args.output), args.target)
    if not slugs:
        console.warning("No articles to delete.")
        return None
    show_choices("Delete Blog Article", "error", "Generated articles:", slugs)
    while True:
        answer = prompt("Enter article number/slug to delete (or 'c' to cancel): ").strip().lower()
        if answer in {"", "c", "cancel"}:
            console.warning("Delete cancelled.")
            return None
        slug = pick_slug(answer, slugs)
        if slug:
            return slug


def prompt_action(prompt: PromptProvider = console.ask) -> str:
    console.banner("Blog Build Script")
    console.heading("What would you like to do?")
    console.info("  [B] Build articles (default)")
    console.info("  [D] Delete an article")
    console.blank()
    answer = prompt("Choose action [B/d]: ").strip().lower()
    if answer in {"d", "delete"}:
        return "delete"
    return "build"


def run_delete_prompt(args: argparse.Namespace, prompt: PromptProvider) -> None:
    slug = prompt_delete(args, prompt)
    if slug:
        delete_article(args, slug)


def run(args: argparse.Namespace, prompt: PromptProvider = console.ask) -> None:
    if args.delete:
        run_delete_prompt(args, prompt)
        return
    if args.delete_slug is not None:
        delete_article(args, args.delete_slug)
        return
    if args.all:
        build(args, BUILD_ALL)
    elif args.slug:
        build(args, args.slug)
    elif prompt_action(prompt) == "delete":
        run_delete_prompt(args, prompt)
    else:
        build(args, prompt_build_target(args, prompt))


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default=DEFAULT_CONFIG)
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    def cfg_str(key: str, default: str) -> str:
        value = config.get(key)
        return default if value is None else str(value)

    parser = argparse.ArgumentParser(
        description="Convert markdown articles into generated blog data modules.",
        epilog="Run without arguments to choose an action interactively.",
    )
    parser.add_argument("slug", nargs="?", help="Build a single article by slug.")
    parser.add_argument("-a", "--all", action="store_true", help="Build every article.")
    parser.add_argument("--delete", action="store_true", help="Choose an article to delete interactively.")
    parser.add_argument("-d", "--delete-slug", metavar="SLUG", help="Delete the generated module for SLUG.")
    parser.add_argument("--config", default=pre_args.config, help="Path to config file (TOML/YAML/JSON).")
    parser.add_argument(
        "--content", default=cfg_str("content", "blog-content"), help="Directory containing markdown articles."
    )
    parser.add_argument(
        "--images",
        default=cfg_str("images", ""),
        help="Directory containing article images (default: <content>/images).",
    )
    parser.add_argument(
        "--output", default=cfg_str("output", "src/data/blog"), help="Directory for generated data modules."
    )
    parser.add_argument(
        "--public-images",
        default=cfg_str("public_images", "public/images/blog"),
        help="Directory images are copied to.",
    )
    parser.add_argument(
        "--image-prefix",
        default=cfg_str("image_prefix", DEFAULT_IMAGE_PREFIX),
        help="Relative image prefix rewritten to the public image path.",
    )
    parser.add_argument(
        "--public-image-path",
        default=cfg_str("public_image_path", DEFAULT_PUBLIC_IMAGE_PATH),
        help="URL path images are served from.",
    )
    parser.add_argument(
        "--target",
        choices=TARGETS,
        default=cfg_str("target", "python"),
        help="Language of the generated modules.",
    )
    parser.add_argument(
        "--renderer",
        choices=sorted(ENGINES),
        default=cfg_str("renderer", "basic"),
        help="Markdown engine used for article bodies.",
    )
    parser.add_argument(
        "--types-import",
        default=cfg_str("types_import", DEFAULT_TYPES_IMPORT),
        help="Module the TypeScript target imports BlogPost types from.",
    )
    args = parser.parse_args(argv)
    if args.delete_slug is not None and (not args.delete_slug or args.delete_slug.startswith("-")):
        parser.error("Please provide an article slug to delete")
    if args.target not in TARGETS:
        parser.error(f"Unknown target in config: {args.target}")
    if args.renderer not in ENGINES:
        parser.error(f"Unknown renderer in config: {args.renderer}")
    return args


def main(argv: Optional[list[str]] = None, prompt: PromptProvider = console.ask) -> None:
    args = parse_args(argv)
    try:
        run(args, prompt)
    except (BlogBuildError, OSError) as exc:
        console.error(f"Error: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.blank()
        console.warning("Aborted.")
        sys.exit(130)
