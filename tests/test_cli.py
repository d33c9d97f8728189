"""Tests for the CLI module."""

import io
import json
import zipfile
from unittest.mock import MagicMock, patch

import pytest

from article_epub.cli import main
from article_epub.clients import NotFoundError
from article_epub.exceptions import ExtractionError

STORY_URL = "https://news.example.com/2024/rivers"


def mock_page_client(mock_client_class, page_html):
    """Wire a patched PageClient class so fetch returns page_html."""
    mock_client = MagicMock()
    mock_client.__enter__ = MagicMock(return_value=mock_client)
    mock_client.__exit__ = MagicMock(return_value=False)
    mock_client.fetch = MagicMock(return_value=page_html)
    mock_client_class.for_url.return_value = mock_client
    return mock_client


@pytest.fixture
def article_file(tmp_path, sample_article):
    path = tmp_path / "article.json"
    path.write_text(sample_article.model_dump_json())
    return path


class TestCLIPreview:
    """Tests for the preview command."""

    @patch("article_epub.cli.PageClient")
    def test_preview_prints_summary(self, mock_client_class, sample_page_html, capsys):
        """preview prints the article summary as JSON."""
        mock_client = mock_page_client(mock_client_class, sample_page_html)

        result = main(["preview", STORY_URL, "--timeout", "5", "--retries", "2"])

        assert result == 0
        mock_client_class.for_url.assert_called_once_with(
            STORY_URL, {"timeout": 5.0, "retry_attempts": 2}
        )
        mock_client.fetch.assert_called_once_with(STORY_URL)

        summary = json.loads(capsys.readouterr().out)
        assert summary["byline"] == "Jane Smith"
        assert summary["reading_time"] == 1
        assert summary["filename"].endswith(".epub")
        assert "content" not in summary

    @patch("article_epub.cli.PageClient")
    def test_preview_with_content(self, mock_client_class, sample_page_html, capsys):
        mock_page_client(mock_client_class, sample_page_html)

        result = main(["preview", STORY_URL, "--content"])

        assert result == 0
        summary = json.loads(capsys.readouterr().out)
        assert "decade of drought" in summary["content"]

    @patch("article_epub.cli.PageClient")
    def test_preview_handles_fetch_error(self, mock_client_class, caplog):
        mock_client = mock_page_client(mock_client_class, "")
        mock_client.fetch.side_effect = NotFoundError(f"Page not found: {STORY_URL}")

        result = main(["preview", STORY_URL])

        assert result == 1
        assert "Failed to extract content: Page not found" in caplog.text


class TestCLIConvert:
    """Tests for the convert command."""

    @patch("article_epub.cli.PageClient")
    def test_convert_writes_epub(self, mock_client_class, sample_page_html, tmp_path):
        """convert writes a valid EPUB to the output directory."""
        mock_page_client(mock_client_class, sample_page_html)
        output_dir = tmp_path / "books"

        result = main([
            "convert", STORY_URL,
            "--output", str(output_dir),
            "--filename", "rivers.epub",
            "--identifier", "1700000000000",
        ])

        assert result == 0
        epub_path = output_dir / "rivers.epub"
        with zipfile.ZipFile(epub_path) as archive:
            assert archive.namelist()[0] == "mimetype"
            assert b"1700000000000" in archive.read("OEBPS/content.opf")
            assert b"Jane Smith" in archive.read("OEBPS/content.xhtml")

    @patch("article_epub.cli.PageClient")
    def test_convert_saves_article(self, mock_client_class, sample_page_html, tmp_path):
        mock_page_client(mock_client_class, sample_page_html)
        saved = tmp_path / "article.json"

        result = main([
            "convert", STORY_URL,
            "--output", str(tmp_path),
            "--save-article", str(saved),
        ])

        assert result == 0
        assert json.loads(saved.read_text())["byline"] == "Jane Smith"
        assert len(list(tmp_path.glob("*.epub"))) == 1

    @patch("article_epub.cli.ArticleExtractor")
    @patch("article_epub.cli.PageClient")
    def test_convert_handles_extraction_error(
        self, mock_client_class, mock_extractor_class, tmp_path, caplog
    ):
        mock_page_client(mock_client_class, "<html></html>")
        mock_extractor_class.return_value.extract.side_effect = ExtractionError(url=STORY_URL)

        result = main(["convert", STORY_URL, "--output", str(tmp_path)])

        assert result == 1
        assert "Could not extract article content" in caplog.text
        assert list(tmp_path.glob("*.epub")) == []

    @patch("article_epub.cli.EPUBPackager")
    @patch("article_epub.cli.PageClient")
    def test_convert_handles_packaging_error(
        self, mock_client_class, mock_packager_class, sample_page_html, tmp_path, caplog
    ):
        mock_page_client(mock_client_class, sample_page_html)
        mock_packager_class.return_value.write.side_effect = OSError("disk full")

        result = main(["convert", STORY_URL, "--output", str(tmp_path)])

        assert result == 1
        assert "Failed to generate EPUB: disk full" in caplog.text

    @patch("article_epub.cli.PageClient")
    def test_convert_handles_unwritable_article_path(
        self, mock_client_class, sample_page_html, tmp_path, caplog
    ):
        """A --save-article path that cannot be written fails cleanly."""
        mock_page_client(mock_client_class, sample_page_html)

        result = main([
            "convert", STORY_URL,
            "--output", str(tmp_path),
            "--save-article", str(tmp_path / "missing" / "article.json"),
        ])

        assert result == 1
        assert "Failed to save article" in caplog.text
        assert list(tmp_path.glob("*.epub")) == []


class TestCLIPackage:
    """Tests for the package command."""

    def test_package_requires_article_argument(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["package"])

        assert exc_info.value.code == 2

    def test_package_missing_article_file(self, tmp_path, caplog):
        result = main(["package", "--article", str(tmp_path / "missing.json")])

        assert result == 1
        assert "Article file not found" in caplog.text

    def test_package_invalid_article_file(self, tmp_path, caplog):
        path = tmp_path / "article.json"
        path.write_text('{"byline": "No title"}')

        result = main(["package", "--article", str(path)])

        assert result == 1
        assert "Invalid article file" in caplog.text

    def test_package_undecodable_article_file(self, tmp_path, caplog):
        path = tmp_path / "article.json"
        path.write_bytes(b"\xff\xfe{\"title\": \"x\"}")

        result = main(["package", "--article", str(path)])

        assert result == 1
        assert "Could not read article file" in caplog.text

    def test_package_success(self, article_file, tmp_path):
        """package names the file after the title by default."""
        result = main([
            "package",
            "--article", str(article_file),
            "--output", str(tmp_path),
            "--language", "fr",
        ])

        assert result == 0
        epub_path = tmp_path / "A___B__Test_.epub"
        with zipfile.ZipFile(epub_path) as archive:
            opf = archive.read("OEBPS/content.opf").decode("utf-8")
            xhtml = archive.read("OEBPS/content.xhtml").decode("utf-8")

        assert "<dc:language>fr</dc:language>" in opf
        assert "<script" not in xhtml
        assert "<br />" in xhtml


class TestCLISanitize:
    """Tests for the sanitize command."""

    def test_sanitize_file(self, tmp_path, capsys):
        path = tmp_path / "fragment.html"
        path.write_text("<p>Fish & Chips<br></p><!-- note --><div></div>")

        result = main(["sanitize", str(path)])

        assert result == 0
        assert capsys.readouterr().out == "<p>Fish &amp; Chips<br /></p>\n"

    def test_sanitize_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("<img src=a.png><script>x</script>"))

        result = main(["sanitize", "-"])

        assert result == 0
        assert capsys.readouterr().out == "<img src=a.png />\n"

    def test_sanitize_undecodable_file(self, tmp_path, caplog):
        path = tmp_path / "fragment.html"
        path.write_bytes(b"<p>caf\xe9</p>")

        result = main(["sanitize", str(path)])

        assert result == 1
        assert "Could not read input file" in caplog.text

    def test_sanitize_missing_file(self, tmp_path, caplog):
        result = main(["sanitize", str(tmp_path / "missing.html")])

        assert result == 1
        assert "Input file not found" in caplog.text


class TestCLIMain:
    """Tests for main CLI entry point."""

    def test_no_command_shows_help(self, capsys):
        result = main([])

        assert result == 0
        assert "article-epub" in capsys.readouterr().out

    def test_help_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])

        assert exc_info.value.code == 0
        assert "convert" in capsys.readouterr().out
