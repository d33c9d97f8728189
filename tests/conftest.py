"""Pytest fixtures for article-epub tests."""

import pytest

from schemas.article import Article


@pytest.fixture
def sample_article():
    """Article matching what the extractor hands to the packager."""
    return Article(
        title="A & B <Test>",
        byline="J. Doe",
        content="<p>Hello</p><script>x()</script><br>",
        text_content="Hello",
        word_count=1,
        reading_time=1,
    )


@pytest.fixture
def sample_page_html():
    """A news page with chrome, an article body, images and a byline."""
    return """<!DOCTYPE html>
<html>
<head>
  <title>Rivers Return to the Valley | The Example Times</title>
  <meta name="author" content="Jane Smith">
  <style>body { color: red; }</style>
  <script>trackVisitor();</script>
</head>
<body>
  <nav><a href="/">Home</a> <a href="/news">News</a></nav>
  <article>
    <h1>Rivers Return to the Valley</h1>
    <p class="byline">By Jane Smith</p>
    <figure><img src="river.jpg" alt="A river"><figcaption>The river in spring.</figcaption></figure>
    <p>After a decade of drought the rivers of the valley are flowing again,
    and farmers who had given up on irrigation are planting once more. The
    change came slowly, then all at once, as winter storms refilled the
    reservoirs upstream and the aquifers recovered beneath the fields.</p>
    <div class="photo-credit">Photo by Someone Else</div>
    <p>Local officials say water rights &amp; allocations will be reviewed
    before the summer season. "We have to plan for the next dry year now,"
    said the district manager, who has overseen the basin for twenty years.</p>
    <p>Scientists caution that a single wet season does not end a drought,
    but the data so far is encouraging for everyone who depends on the
    valley's water, from orchards to the towns along the river banks.</p>
  </article>
  <footer>Copyright The Example Times</footer>
</body>
</html>"""
