"""wp2md CLI - Click command definitions and main entry point."""

from __future__ import annotations

import logging
from pathlib import Path

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from wp2md.convert import post_to_markdown
from wp2md.errors import ConversionError
from wp2md.export import Post, read_export
from wp2md.media import localize_images
from wp2md.output import DEFAULT_HERO, build_frontmatter, pick_hero_image, save_post

console = Console(stderr=True)
logger = logging.getLogger(__name__)


@click.command()
@click.argument("export_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", "output_dir", type=click.Path(file_okay=False, path_type=Path),
              default=Path("out"), show_default=True, help="Output directory")
@click.option("-t", "--post-type", "post_types", multiple=True, default=("post",),
              show_default=True, help="wp:post_type values to convert (repeatable)")
@click.option("--no-images", is_flag=True, help="Keep remote image URLs, don't download")
@click.option("--default-image", default=DEFAULT_HERO, show_default=True,
              help="Frontmatter image when a post has none")
@click.option("--limit", default=None, type=int, help="Convert at most N posts")
@click.option("--timeout", default=10, show_default=True, help="Image download timeout in seconds")
@click.option("-v", "--verbose", is_flag=True, help="Verbose progress output")
def main(
    export_file: Path,
    output_dir: Path,
    post_types: tuple[str, ...],
    no_images: bool,
    default_image: str,
    limit: int | None,
    timeout: int,
    verbose: bool,
):
    """Convert a WordPress export (WXR) into markdown posts.

    Each post is written to OUTPUT/<slug>/index.md, with its images under
    OUTPUT/<slug>/img/.

    \b
    Examples:
        wp2md export.xml                      # posts into ./out
        wp2md export.xml -o content/blog      # custom output directory
        wp2md export.xml -t post -t page      # posts and pages
        wp2md export.xml --no-images          # leave images remote
    """
    _setup_logging(verbose)

    if verbose:
        console.print(Panel(
            f"[bold]wp2md - WordPress to Markdown[/bold]\n{export_file}\n"
            f"Types: {', '.join(post_types)}",
            expand=False,
        ))

    posts = read_export(export_file, post_types=post_types)
    if limit:
        posts = posts[:limit]

    if not posts:
        console.print("[yellow]No matching posts in export[/yellow]")
        return

    failed = 0
    with httpx.Client(timeout=timeout, follow_redirects=True) as client, Progress(
        SpinnerColumn(), TextColumn("[progress.description]{task.description}"),
        BarColumn(), MofNCompleteColumn(),
        console=console, transient=True,
    ) as progress:
        task = progress.add_task(description="Converting...", total=len(posts))

        for post in posts:
            progress.update(task, description=post.slug)
            try:
                out = convert_post(
                    post, output_dir,
                    client=None if no_images else client,
                    default_image=default_image,
                )
            except ConversionError as exc:
                failed += 1
                logger.error("Failed to convert %s: %s", post.slug, exc)
            except Exception:
                failed += 1
                logger.exception("Unexpected error converting %s", post.slug)
            else:
                if verbose:
                    console.print(f"[green]Saved:[/green] {out}")
            progress.advance(task)

    converted = len(posts) - failed
    console.print(f"[bold green]Done![/bold green] Converted {converted}/{len(posts)} posts")
    if failed:
        raise click.ClickException(f"{failed} post(s) failed to convert")


def convert_post(
    post: Post,
    output_dir: Path,
    client: httpx.Client | None = None,
    default_image: str = DEFAULT_HERO,
) -> Path:
    """Convert one post and write it to disk. Returns the written path.

    Images are only downloaded when an HTTP client is given.
    """
    post_dir = output_dir / post.slug
    content = post.content
    images: list[str] = []

    if client is not None:
        content, images = localize_images(content, post_dir, client, extra_urls=post.hero_images[:1])

    try:
        markdown = post_to_markdown(content)
    except ConversionError as exc:
        exc.slug = post.slug
        raise

    document = build_frontmatter(
        post, markdown,
        hero_image=pick_hero_image(images),
        default_image=default_image,
    )
    return save_post(document, post_dir / "index.md")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


if __name__ == "__main__":
    main()
