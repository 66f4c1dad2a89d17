"""
Uniform read-only access to DOM-like elements from either
BeautifulSoup (bs4.Tag) or lxml (lxml.html.HtmlElement).
"""

import bs4
from bs4 import BeautifulSoup
from collections.abc import Iterator
import lxml.html
from typing import Literal, Tuple, Union

# HTML parsing library to use. See comparison between options at:
# https://beautiful-soup-4.readthedocs.io/en/latest/#installing-a-parser
HtmlParserType = Literal['lxml', 'html_parser']

HTML_PARSER_TYPE_CHOICES = (
    HtmlParserType.__args__  # type: ignore[attr-defined]
)  # type: Tuple[HtmlParserType, ...]

Tag = Union[lxml.html.HtmlElement, bs4.Tag]


def parse_html_fragment(html: str, parser_type: HtmlParserType) -> Tag:
    """
    Parses an HTML fragment, returning its first element.

    Raises:
    * ValueError -- if the fragment contains no element.
    """
    if parser_type == 'lxml':
        return lxml.html.fragment_fromstring(html)
    elif parser_type == 'html_parser':
        soup = BeautifulSoup(html, features='html.parser')
        tag = soup.find(True)
        if not isinstance(tag, bs4.Tag):
            raise ValueError(f'HTML fragment contains no element: {html!r}')
        return tag
    else:
        raise ValueError(f'Unrecognized value for parser_type: {parser_type}')


def is_dom_element(value: object) -> bool:
    # NOTE: bs4.BeautifulSoup is itself a Tag, but a document is not an element
    return (
        isinstance(value, lxml.html.HtmlElement) or
        (isinstance(value, bs4.Tag) and not isinstance(value, BeautifulSoup))
    )


def dom_tag_name(tag: Tag) -> str:
    if isinstance(tag, lxml.html.HtmlElement):
        return tag.tag
    elif isinstance(tag, bs4.Tag):
        return tag.name
    else:
        raise ValueError()


def dom_attrs(tag: Tag) -> dict[str, str]:
    """
    Returns the attributes of the specified element.

    Multi-valued attributes (like bs4's "class") are joined with spaces.
    """
    if isinstance(tag, lxml.html.HtmlElement):
        return dict(tag.attrib)
    elif isinstance(tag, bs4.Tag):
        return {
            k: (' '.join(v) if isinstance(v, list) else v)
            for (k, v) in tag.attrs.items()
        }
    else:
        raise ValueError()


def dom_children(tag: Tag) -> list[Tag]:
    """Returns the child elements of the specified element, skipping text and comments."""
    return [c for c in dom_content(tag) if not isinstance(c, str)]


def dom_content(tag: Tag) -> list[Tag | str]:
    """
    Returns the child elements and non-blank text of the specified element,
    in document order.
    """
    return list(_iter_content(tag))


def _iter_content(tag: Tag) -> Iterator[Tag | str]:
    if isinstance(tag, lxml.html.HtmlElement):
        if tag.text is not None and tag.text.strip() != '':
            yield tag.text.strip()
        for child in tag:
            # Comments and processing instructions are not HtmlElements
            if isinstance(child, lxml.html.HtmlElement):
                yield child
            if child.tail is not None and child.tail.strip() != '':
                yield child.tail.strip()
    elif isinstance(tag, bs4.Tag):
        for child in tag.children:
            if isinstance(child, bs4.Tag):
                yield child
            elif type(child) is bs4.NavigableString:
                if child.strip() != '':
                    yield str(child).strip()
            else:
                # bs4.Comment, bs4.Doctype, etc
                pass
    else:
        raise ValueError()


def dom_class_names(tag: Tag) -> list[str]:
    return dom_attrs(tag).get('class', '').split()
