"""
Tree elements, style descriptors, and node classification.

A tree element is the unit being serialized. A style-prop element is a tree
element whose props carry a style descriptor (under STYLE_PROP) and the
element type it wraps (under STYLE_TYPE_PROP) instead of a resolved className.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from stylesnap.dom import is_dom_element
from typing import Any


STYLE_PROP = 'css'
STYLE_TYPE_PROP = '__stylesnap_type__'
STYLE_LABEL_PROP = '__stylesnap_label__'

# Value left in STYLE_PROP after the descriptor has been stripped.
# Removed later by the cleaner if the element's className resolves.
UNKNOWN_STYLES = 'unknown styles'

STYLE_PROP_DISPLAY_NAME = 'StylePropInternal'


# ------------------------------------------------------------------------------
# Element Types

class Component:
    """A named, non-DOM element type."""
    def __init__(self, display_name: str) -> None:
        self.display_name = display_name

    def __repr__(self) -> str:
        return f'Component({self.display_name!r})'


# Type of a constructed style-prop element.
# A shallow renderer records the same element with type == STYLE_PROP_DISPLAY_NAME.
STYLE_PROP_ELEMENT_TYPE = Component(STYLE_PROP_DISPLAY_NAME)


class UnresolvableElementTypeError(TypeError):
    def __init__(self, element_type: object) -> None:
        super().__init__(
            f'Unable to resolve the element type wrapped by a style-prop element: {element_type!r}')
        self.element_type = element_type


def resolve_element_type_name(element_type: object) -> str:
    """
    Returns the printable name of an element type.

    Strings are DOM tag names and are returned verbatim. Other types
    must expose a display_name or a __name__.

    Raises:
    * UnresolvableElementTypeError
    """
    if isinstance(element_type, str):
        return element_type
    for attr_name in ('display_name', '__name__'):
        name = getattr(element_type, attr_name, None)
        if isinstance(name, str) and name != '':
            return name
    raise UnresolvableElementTypeError(element_type)


# ------------------------------------------------------------------------------
# Element

@dataclass(eq=False)
class Element:
    type: Any
    props: dict[str, Any] = field(default_factory=dict)
    children: list[Any] = field(default_factory=list)

    def copy(self) -> Element:
        """
        Returns a structural copy of this element with its own props dict
        and children list. Prop values and children are shared.
        """
        return Element(self.type, dict(self.props), list(self.children))


@dataclass(frozen=True)
class StyleDescriptor:
    name: str
    styles: str


def style_prop_element(
        wrapped_type: object,
        descriptor: StyleDescriptor,
        props: dict[str, Any] | None=None,
        children: list[Any] | None=None,
        *, shallow: bool=False,
        label: str | None=None,
        ) -> Element:
    """
    Creates an element that applies the styles of `descriptor` to
    an element of type `wrapped_type`.

    If `shallow` is True, creates the element in the form recorded by
    a shallow renderer, whose children are whatever was supplied literally
    rather than the rendered output of the wrapped type.
    """
    all_props = dict(props or {})
    all_props[STYLE_PROP] = descriptor
    all_props[STYLE_TYPE_PROP] = wrapped_type
    if label is not None:
        all_props[STYLE_LABEL_PROP] = label
    return Element(
        STYLE_PROP_DISPLAY_NAME if shallow else STYLE_PROP_ELEMENT_TYPE,
        all_props,
        list(children or []),
    )


# ------------------------------------------------------------------------------
# Classification

class NodeKind(Enum):
    PRIMITIVE = 'primitive'
    ELEMENT = 'element'
    STYLE_PROP_ELEMENT = 'style_prop_element'
    SHALLOW_STYLE_PROP_ELEMENT = 'shallow_style_prop_element'
    DOM_ELEMENT = 'dom_element'
    OTHER = 'other'


_PRIMITIVE_TYPES = (str, bytes, int, float, bool, type(None))


def classify(value: object) -> NodeKind:
    if isinstance(value, _PRIMITIVE_TYPES):
        return NodeKind.PRIMITIVE
    if isinstance(value, Element):
        if STYLE_PROP in value.props and STYLE_TYPE_PROP in value.props:
            if value.type is STYLE_PROP_ELEMENT_TYPE:
                return NodeKind.STYLE_PROP_ELEMENT
            if value.type == STYLE_PROP_DISPLAY_NAME:
                return NodeKind.SHALLOW_STYLE_PROP_ELEMENT
        return NodeKind.ELEMENT
    if is_dom_element(value):
        return NodeKind.DOM_ELEMENT
    return NodeKind.OTHER


def is_primitive(value: object) -> bool:
    return classify(value) == NodeKind.PRIMITIVE


def is_tree_element(value: object) -> bool:
    return isinstance(value, Element)


def is_style_prop_element(value: object) -> bool:
    return classify(value) == NodeKind.STYLE_PROP_ELEMENT


def is_shallow_style_prop_element(value: object) -> bool:
    return classify(value) == NodeKind.SHALLOW_STYLE_PROP_ELEMENT
