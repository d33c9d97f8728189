"""Sanitizer for article HTML fragments.

Repairs an extracted article body so it can be embedded verbatim in a
strict XHTML document inside an EPUB. The repair is regex based and never
fails: malformed input degrades to partially cleaned output.

Pipeline order:
1. repair_malformed_tags
2. strip_scripts_and_styles, strip_comments, strip_declarations
3. prune_empty_wrappers
4. normalize_void_elements
5. escape_ampersands

Steps 1-3 (with removal of stray void end tags) repeat until the fragment
stops changing, since removing one construct can join the halves of
another, e.g. "<scr<p></p>ipt>". Every change in those steps removes at
least one "<", so the loop ends.
"""

import logging
import re
from html.entities import html5

logger = logging.getLogger(__name__)

VOID_ELEMENTS = (
    "br",
    "hr",
    "img",
    "input",
    "meta",
    "link",
    "area",
    "base",
    "col",
    "embed",
    "source",
    "track",
    "wbr",
)

# Void children that keep an otherwise empty wrapper alive
CONTENT_VOID_ELEMENTS = ("img", "br", "hr")

XML_PREDEFINED_ENTITIES = frozenset({"amp", "lt", "gt", "quot", "apos"})

_VOID_NAMES = "|".join(VOID_ELEMENTS)

# Attribute text inside a tag; quoted values may contain ">"
_ATTRS = r"""(?:"[^"]*"|'[^']*'|[^'"<>])*"""

_EMPTY_TAG_RE = re.compile(r"<\s*(?:/\s*){0,2}>")
_NAMESPACED_ELEMENT_RE = re.compile(
    r"<([A-Za-z][\w.-]*:[\w.:-]*)(?=[\s/>])" + _ATTRS + r"(?<!/)>.*?</\1\s*>",
    re.DOTALL | re.IGNORECASE,
)
_NAMESPACED_TAG_RE = re.compile(r"</?[A-Za-z][\w.-]*:" + _ATTRS + ">")
_LONE_LT_RE = re.compile(r"<(?!/?[A-Za-z]|!--|![A-Za-z]|\?)")

_SCRIPT_STYLE_RE = re.compile(
    r"<(script|style)(?=[\s/>])" + _ATTRS + r"(?<!/)>.*?</\1\s*>",
    re.DOTALL | re.IGNORECASE,
)
_SCRIPT_STYLE_TAG_RE = re.compile(
    r"</?(?:script|style)(?=[\s/>])" + _ATTRS + ">", re.IGNORECASE
)
# An unterminated comment runs to the end of the fragment
_COMMENT_RE = re.compile(r"<!--.*?(?:-->|\Z)", re.DOTALL)
_DECLARATION_RE = re.compile(r"<![A-Za-z][^>]*>|<\?.*?\?>", re.DOTALL)

_BLANK = r"(?:\s|&nbsp;|&#160;|&#x0*a0;)"
_NON_CONTENT_TAG = (
    rf"<(?!/?(?:p|div|{'|'.join(CONTENT_VOID_ELEMENTS)})(?=[\s/>]))" + _ATTRS + ">"
)
_EMPTY_WRAPPER_RE = re.compile(
    rf"<(p|div)(?:\s{_ATTRS})?(?<!/)>(?:{_BLANK}|{_NON_CONTENT_TAG})*</\1\s*>",
    re.IGNORECASE,
)
_SELF_CLOSED_WRAPPER_RE = re.compile(
    r"<(?:p|div)(?=[\s/])" + _ATTRS + "/>", re.IGNORECASE
)

_VOID_TAG_RE = re.compile(
    rf"<({_VOID_NAMES})(?=[\s/>])({_ATTRS})>",
    re.IGNORECASE,
)
_VOID_END_TAG_RE = re.compile(rf"</(?:{_VOID_NAMES})\s*>", re.IGNORECASE)

_BARE_AMPERSAND_RE = re.compile(r"&(?![a-zA-Z0-9#]{1,7};)")
_NAMED_ENTITY_RE = re.compile(r"&([A-Za-z][A-Za-z0-9]{0,6});")


def sanitize(fragment: str | None) -> str:
    """Sanitize an HTML fragment for inclusion in an XHTML document.

    Args:
        fragment: Raw HTML body fragment (may be None or empty)

    Returns:
        Fragment free of scripts, styles and comments, with empty wrappers
        pruned, void elements self-closed and stray ampersands escaped

    Examples:
        >>> sanitize('<p>a</p><script>evil()</script><p>b &amp; c<br></p>')
        '<p>a</p><p>b &amp; c<br /></p>'
    """
    if not fragment:
        return ""

    result = fragment
    while True:
        cleaned = _remove_unsafe_markup(result)
        if cleaned == result:
            break
        result = cleaned

    result = normalize_void_elements(result)
    result = escape_ampersands(result)

    logger.debug(f"Sanitized fragment: {len(fragment)} -> {len(result)} characters")
    return result


def _remove_unsafe_markup(fragment: str) -> str:
    result = repair_malformed_tags(fragment)
    result = strip_scripts_and_styles(result)
    result = strip_comments(result)
    result = strip_declarations(result)
    result = _VOID_END_TAG_RE.sub("", result)
    return prune_empty_wrappers(result)


def repair_malformed_tags(fragment: str) -> str:
    """Drop tags with no name or a namespaced name, escape lone '<'.

    Namespaced elements (e.g. Word's <o:p>) are removed with their content.

    Examples:
        >>> repair_malformed_tags('<p>1 < 2<o:p>&nbsp;</o:p></p><>')
        '<p>1 &lt; 2</p>'
    """
    if not fragment:
        return ""
    result = _EMPTY_TAG_RE.sub("", fragment)
    result = _NAMESPACED_ELEMENT_RE.sub("", result)
    result = _NAMESPACED_TAG_RE.sub("", result)
    return _LONE_LT_RE.sub("&lt;", result)


def strip_scripts_and_styles(fragment: str) -> str:
    """Remove <script> and <style> elements and everything inside them.

    Examples:
        >>> strip_scripts_and_styles('<p>a</p><SCRIPT type="x">b()</SCRIPT>')
        '<p>a</p>'
    """
    if not fragment:
        return ""
    result = _SCRIPT_STYLE_RE.sub("", fragment)
    return _SCRIPT_STYLE_TAG_RE.sub("", result)


def strip_comments(fragment: str) -> str:
    """Remove HTML comments, including multi-line ones."""
    if not fragment:
        return ""
    return _COMMENT_RE.sub("", fragment)


def strip_declarations(fragment: str) -> str:
    """Remove doctype declarations and processing instructions."""
    if not fragment:
        return ""
    return _DECLARATION_RE.sub("", fragment)


def prune_empty_wrappers(fragment: str) -> str:
    """Remove <p> and <div> elements with no text and no img/br/hr child.

    Runs until nothing changes so that wrappers holding only empty
    wrappers are removed as well.

    Examples:
        >>> prune_empty_wrappers('<div><p> </p></div><p>text</p>')
        '<p>text</p>'
        >>> prune_empty_wrappers('<p><br></p>')
        '<p><br></p>'
    """
    if not fragment:
        return ""
    result = _SELF_CLOSED_WRAPPER_RE.sub("", fragment)
    while True:
        pruned = _EMPTY_WRAPPER_RE.sub("", result)
        if pruned == result:
            return result
        result = pruned


def normalize_void_elements(fragment: str) -> str:
    """Rewrite every void element as <tag attrs />.

    Attributes are kept verbatim and in order, including quoted values
    that contain ">". Stray end tags such as </br> are dropped.

    Examples:
        >>> normalize_void_elements('<br><hr class="x"/><BR></br>')
        '<br /><hr class="x" /><br />'
    """
    if not fragment:
        return ""

    def self_close(match: re.Match) -> str:
        name = match.group(1).lower()
        attrs = match.group(2).rstrip()
        if attrs.endswith("/"):
            attrs = attrs[:-1].rstrip()
        return f"<{name}{attrs} />"

    result = _VOID_TAG_RE.sub(self_close, fragment)
    return _VOID_END_TAG_RE.sub("", result)


def escape_ampersands(fragment: str) -> str:
    """Escape '&' that does not start a character or entity reference.

    Named HTML entities the XML parser cannot resolve without a DTD
    (e.g. &nbsp;) become numeric character references.

    Examples:
        >>> escape_ampersands('A & B &amp; C&nbsp;D')
        'A &amp; B &amp; C&#160;D'
    """
    if not fragment:
        return ""
    result = _BARE_AMPERSAND_RE.sub("&amp;", fragment)
    return _NAMED_ENTITY_RE.sub(_numeric_reference, result)


def _numeric_reference(match: re.Match) -> str:
    name = match.group(1)
    if name in XML_PREDEFINED_ENTITIES:
        return match.group(0)
    chars = html5.get(f"{name};")
    if chars is None:
        return match.group(0)
    return "".join(f"&#{ord(c)};" for c in chars)
