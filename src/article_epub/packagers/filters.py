"""Jinja2 filters for EPUB template rendering.

These filters are used by the container, OPF, NCX and XHTML templates.
"""

import re

from markupsafe import Markup

XML_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    "'": "&apos;",
    '"': "&quot;",
}

_XML_SPECIAL_RE = re.compile(r"[<>&'\"]")


def escape_xml(text: str) -> Markup:
    """Escape the five XML special characters in plain text.

    Returns Markup so autoescaping templates do not escape it twice.

    Args:
        text: Plain text such as a title or byline

    Returns:
        Escaped text safe for XML element and attribute content

    Examples:
        >>> str(escape_xml('A & B <"Test">'))
        'A &amp; B &lt;&quot;Test&quot;&gt;'
    """
    if not text:
        return Markup("")
    return Markup(_XML_SPECIAL_RE.sub(lambda m: XML_ESCAPES[m.group(0)], str(text)))


# Registry of all filters for easy registration with Jinja2
FILTERS = {
    "escape_xml": escape_xml,
}
