"""Command-line interface for article-epub."""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from schemas.article import Article

from article_epub.clients import PageClient
from article_epub.extractors import ArticleExtractor
from article_epub.packagers import EPUBPackager, epub_filename
from article_epub.sanitizers import sanitize

DEFAULT_OUTPUT_DIR = Path(".")
DEFAULT_TIMEOUT = 30.0
DEFAULT_LANGUAGE = "en"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def _client_config(args: argparse.Namespace) -> dict:
    return {
        "timeout": args.timeout,
        "retry_attempts": args.retries,
    }


def _fetch_article(args: argparse.Namespace) -> Article:
    """Fetch args.url and extract its article."""
    with PageClient.for_url(args.url, _client_config(args)) as client:
        page_html = client.fetch(args.url)
    return ArticleExtractor().extract(page_html, url=args.url)


def _write_epub(args: argparse.Namespace, article: Article) -> Path:
    """Package an article into the output directory."""
    output_dir = args.output
    output_dir.mkdir(parents=True, exist_ok=True)
    epub_path = output_dir / (args.filename or epub_filename(article.title))

    packager = EPUBPackager(language=args.language)
    size = packager.write(article, epub_path, identifier=args.identifier)

    logger = logging.getLogger(__name__)
    logger.info(f"Created EPUB: {epub_path}")
    logger.info(f"  Title: {article.title}")
    logger.info(f"  Author: {article.byline}")
    logger.info(f"  Size: {size} bytes")
    return epub_path


def preview(args: argparse.Namespace) -> int:
    """Execute the preview command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        logger.info(f"Extracting content from: {args.url}")
        article = _fetch_article(args)
    except Exception as e:
        logger.error(f"Failed to extract content: {e}")
        return 1

    summary = {
        "title": article.title,
        "byline": article.byline,
        "word_count": article.word_count,
        "reading_time": article.reading_time,
        "filename": epub_filename(article.title),
    }
    if args.content:
        summary["content"] = article.content
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


def convert(args: argparse.Namespace) -> int:
    """Execute the convert command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        logger.info(f"Extracting content from: {args.url}")
        article = _fetch_article(args)
    except Exception as e:
        logger.error(f"Failed to extract content: {e}")
        return 1

    if args.save_article:
        try:
            args.save_article.write_text(article.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to save article: {e}")
            return 1
        logger.info(f"Saved article to {args.save_article}")

    try:
        _write_epub(args, article)
        return 0

    except Exception as e:
        logger.error(f"Failed to generate EPUB: {e}")
        return 1


def package_article(args: argparse.Namespace) -> int:
    """Execute the package command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    article_path = args.article.resolve()
    if not article_path.exists():
        logger.error(f"Article file not found: {article_path}")
        return 1

    try:
        article = Article.model_validate_json(article_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read article file {article_path}: {e}")
        return 1
    except ValidationError as e:
        logger.error(f"Invalid article file {article_path}: {e}")
        return 1

    try:
        _write_epub(args, article)
        return 0

    except Exception as e:
        logger.error(f"Failed to generate EPUB: {e}")
        return 1


def sanitize_html(args: argparse.Namespace) -> int:
    """Execute the sanitize command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    if str(args.input) == "-":
        fragment = sys.stdin.read()
    else:
        input_path = args.input.resolve()
        if not input_path.exists():
            logger.error(f"Input file not found: {input_path}")
            return 1
        try:
            fragment = input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read input file {input_path}: {e}")
            return 1

    sys.stdout.write(sanitize(fragment))
    sys.stdout.write("\n")
    return 0


def _add_fetch_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "url",
        help="URL of the article to fetch",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=3,
        help="Attempts for connection failures and timeouts (default: 3)",
    )


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Output directory for the EPUB (default: current directory)",
    )
    parser.add_argument(
        "--filename",
        type=str,
        default=None,
        help="EPUB filename (default: derived from the article title)",
    )
    parser.add_argument(
        "--language",
        type=str,
        default=DEFAULT_LANGUAGE,
        help=f"Language code declared in the book metadata (default: {DEFAULT_LANGUAGE})",
    )
    parser.add_argument(
        "--identifier",
        type=str,
        default=None,
        help="Book identifier (default: current time in milliseconds)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="article-epub",
        description="Convert web articles into EPUB e-books",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    preview_parser = subparsers.add_parser(
        "preview",
        help="Extract an article and show its summary",
        description="Fetch a web page, extract the readable article and print its title, byline, word count and reading time as JSON.",
    )
    _add_fetch_arguments(preview_parser)
    preview_parser.add_argument(
        "--content",
        action="store_true",
        help="Include the sanitized article body in the output",
    )
    preview_parser.set_defaults(func=preview)

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a web article into an EPUB",
        description="Fetch a web page, extract the readable article and package it as an EPUB e-book.",
    )
    _add_fetch_arguments(convert_parser)
    _add_output_arguments(convert_parser)
    convert_parser.add_argument(
        "--save-article",
        type=Path,
        default=None,
        help="Also write the extracted article as JSON to this path",
    )
    convert_parser.set_defaults(func=convert)

    package_parser = subparsers.add_parser(
        "package",
        help="Package an article JSON file as an EPUB",
        description="Package a previously extracted article (JSON with title, byline and content) as an EPUB e-book.",
    )
    package_parser.add_argument(
        "--article",
        type=Path,
        required=True,
        help="Path to the article JSON file",
    )
    _add_output_arguments(package_parser)
    package_parser.set_defaults(func=package_article)

    sanitize_parser = subparsers.add_parser(
        "sanitize",
        help="Sanitize an HTML fragment for XHTML",
        description="Remove scripts, styles and comments, prune empty wrappers, self-close void elements and escape stray ampersands.",
    )
    sanitize_parser.add_argument(
        "input",
        type=Path,
        help="HTML fragment file, or - for standard input",
    )
    sanitize_parser.set_defaults(func=sanitize_html)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
