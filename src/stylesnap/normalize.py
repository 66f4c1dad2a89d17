"""
Rewrites a tree so that every style-prop element becomes a plain element
that carries a resolved className, or is replaced by its rendered children.

The input tree is never mutated. Every element visited is returned as a
fresh copy, with its own props dict and children list.
"""

from __future__ import annotations

from stylesnap.guard import RecursionGuard
from stylesnap.model import (
    Element, NodeKind, STYLE_LABEL_PROP, STYLE_PROP, STYLE_TYPE_PROP,
    UNKNOWN_STYLES, classify, resolve_element_type_name,
)
from stylesnap.tree import class_names_of
from stylesnap.util.cli import print_warning
import sys
from typing import Any

_STYLE_DESCRIPTOR_PROPS = (STYLE_PROP, STYLE_TYPE_PROP, STYLE_LABEL_PROP)


def normalize(node: Any, keys: list[str], guard: RecursionGuard) -> Any:
    """
    Returns the normalized form of `node`.

    If `node` is a list then each item is normalized, without flattening.
    If `node` is a style-prop element whose children were already rendered
    then the list of its normalized children is returned in its place.

    Arguments:
    * keys -- key-prefixes of the style registry.
    * guard -- nodes already produced by this pipeline, which are returned as-is.

    Raises:
    * UnresolvableElementTypeError
    """
    if isinstance(node, list):
        return [normalize(child, keys, guard) for child in node]
    rewritten = _rewrite(node, keys, guard)
    if len(rewritten) == 1:
        return rewritten[0]
    else:
        return rewritten


def _rewrite(node: Any, keys: list[str], guard: RecursionGuard) -> list[Any]:
    """Rewrites a single node to zero or more nodes."""
    if isinstance(node, list):
        return [normalize(node, keys, guard)]
    if node in guard:
        return [node]

    kind = classify(node)
    if kind == NodeKind.SHALLOW_STYLE_PROP_ELEMENT:
        expected_class_names = _expected_class_names(node, keys)
        if _is_shallow(node, expected_class_names):
            converted = _convert_shallow_element(node, expected_class_names)
        else:
            # The wrapper's children are already rendered and carry its class names
            return _rewrite_all(node.children, keys, guard)
    elif kind == NodeKind.STYLE_PROP_ELEMENT:
        converted = Element(
            node.props[STYLE_TYPE_PROP],
            _without_style_descriptor(node.props),
            list(node.children))
    elif kind == NodeKind.ELEMENT:
        converted = node.copy()
    else:
        # Primitives, DOM-like elements, unrecognized values
        return [node]

    converted.props = {
        k: normalize(v, keys, guard)
        for (k, v) in converted.props.items()
    }
    converted.children = _rewrite_all(converted.children, keys, guard)
    return [converted]


def _rewrite_all(nodes: list[Any], keys: list[str], guard: RecursionGuard) -> list[Any]:
    return [r for n in nodes for r in _rewrite(n, keys, guard)]


# ------------------------------------------------------------------------------
# Shallow Style-Prop Elements

def _expected_class_names(element: Element, keys: list[str]) -> list[str]:
    descriptor = element.props[STYLE_PROP]
    style_ids = (getattr(descriptor, 'name', None) or '').split()
    if len(keys) == 0 and len(style_ids) > 0:
        print_warning(
            f'*** No styles are registered. '
            f'Unable to compute class names for style {" ".join(style_ids)!r}.',
            file=sys.stderr)
    return [
        f'{key}-{style_id}'
        for style_id in style_ids
        for key in keys
    ]


def _is_shallow(element: Element, expected_class_names: list[str]) -> bool:
    """
    Returns whether the specified style-prop element was never actually rendered,
    which is the case if none of its children carry any of its class names.
    """
    child_class_names = {
        c for child in element.children for c in class_names_of(child)
    }
    return child_class_names.isdisjoint(expected_class_names)


def _convert_shallow_element(element: Element, expected_class_names: list[str]) -> Element:
    """
    Raises:
    * UnresolvableElementTypeError
    """
    class_name = ' '.join(filter(None, [
        element.props.get('className'),
        *expected_class_names,
    ]))
    element_type = resolve_element_type_name(element.props[STYLE_TYPE_PROP])
    return Element(
        element_type,
        _without_style_descriptor({**element.props, 'className': class_name}),
        list(element.children))


def _without_style_descriptor(props: dict[str, Any]) -> dict[str, Any]:
    new_props = {
        k: v for (k, v) in props.items()
        if k not in _STYLE_DESCRIPTOR_PROPS
    }
    new_props[STYLE_PROP] = UNKNOWN_STYLES
    return new_props
