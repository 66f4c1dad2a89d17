"""
Walks normalized trees, collecting their elements and class names,
and cleans up props made redundant by normalization.
"""

from __future__ import annotations

from collections.abc import Iterable
from stylesnap.dom import dom_children, dom_class_names, is_dom_element
from stylesnap.model import Element, STYLE_PROP
from stylesnap.util.xcollections.dedup import dedup_list
from typing import Any

_CLASS_NAME_PROPS = ('className', 'class')


def get_nodes(node: Any, nodes: list[Any] | None=None) -> list[Any]:
    """
    Returns all elements in the specified tree, in pre-order.

    Lists are walked but not included. Elements embedded in
    the props of an element are walked before its children.
    """
    if nodes is None:
        nodes = []
    if isinstance(node, list):
        for child in node:
            get_nodes(child, nodes)
    elif isinstance(node, Element):
        nodes.append(node)
        for value in node.props.values():
            if isinstance(value, (Element, list)):
                get_nodes(value, nodes)
        for child in node.children:
            get_nodes(child, nodes)
    elif is_dom_element(node):
        nodes.append(node)
        for child in dom_children(node):
            get_nodes(child, nodes)
    return nodes


def class_names_of(node: Any) -> list[str]:
    if isinstance(node, Element):
        class_name = node.props.get('className') or node.props.get('class')
        return class_name.split() if isinstance(class_name, str) else []
    elif is_dom_element(node):
        return dom_class_names(node)
    else:
        return []


def get_class_names_from_nodes(nodes: Iterable[Any]) -> list[str]:
    """Returns the class names used by the specified nodes, in first-seen order."""
    return dedup_list(c for node in nodes for c in class_names_of(node))


def clean(nodes: Iterable[Any], class_names: list[str]) -> None:
    """
    Removes empty className (or class) props from the specified elements,
    and style props from elements whose class names are among `class_names`.

    Mutates the elements in place. DOM-like elements are left untouched.
    """
    known_class_names = set(class_names)
    for node in nodes:
        if not isinstance(node, Element):
            continue
        for prop in _CLASS_NAME_PROPS:
            if prop in node.props and not node.props[prop]:
                del node.props[prop]
        if not known_class_names.isdisjoint(class_names_of(node)):
            node.props.pop(STYLE_PROP, None)
