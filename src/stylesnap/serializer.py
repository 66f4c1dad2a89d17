"""
Snapshot serializer for trees of elements styled through a style registry.

Generated class names are replaced with deterministic aliases and
the CSS rules they select are printed above the tree, so that snapshots
stay stable from one run to the next.
"""

from __future__ import annotations

from dataclasses import dataclass
from stylesnap.css import get_pretty_styles_from_class_names
from stylesnap.guard import RecursionGuard
from stylesnap.model import NodeKind, classify
from stylesnap.normalize import normalize
from stylesnap.printer import Printer
from stylesnap.registry import StyleRegistry, default_registry, get_keys
from stylesnap.replace import ClassNameReplacer, replace_class_names
from stylesnap.tree import clean, get_class_names_from_nodes, get_nodes
from typing import Any


@dataclass(frozen=True)
class SerializerOptions:
    # Returns the alias for a generated class name given its discovery index.
    # Defaults to stylesnap.replace.default_class_name_replacer.
    class_name_replacer: ClassNameReplacer | None = None
    # Whether to also serialize DOM-like elements (bs4 and lxml elements).
    dom_elements: bool = True


class Serializer:
    """
    A snapshot serializer plugin.

    A printer offers each value it prints to test(). If accepted, the value
    is printed with print(), which calls back into the printer to print
    the normalized tree.
    """

    def __init__(
            self,
            options: SerializerOptions | None=None,
            registry: StyleRegistry | None=None,
            ) -> None:
        self.options = options or SerializerOptions()
        self._registry = registry if registry is not None else default_registry
        # Shared by a top-level print() and the nested print() calls the printer
        # makes back into this serializer. Empty whenever no print() is running.
        self._guard = RecursionGuard()

    def test(self, value: Any) -> bool:
        if value is None or value in self._guard:
            return False
        kind = classify(value)
        if kind == NodeKind.DOM_ELEMENT:
            return self.options.dom_elements
        return kind in (
            NodeKind.ELEMENT,
            NodeKind.STYLE_PROP_ELEMENT,
            NodeKind.SHALLOW_STYLE_PROP_ELEMENT,
        )

    def print(self, value: Any, printer: Printer) -> str:
        """
        Prints the specified value with `printer` after normalizing it,
        returning the snapshot text.

        When called by `printer` for a node that an enclosing call already
        produced, returns the printed text alone. Otherwise the formatted CSS
        of all referenced class names is prepended and generated class names
        are replaced with aliases.

        Raises:
        * StyleParseError -- if registered CSS for a referenced class name is malformed.
        * UnresolvableElementTypeError
        """
        is_nested_print = value in self._guard

        elements = self._registry.get_style_elements()
        keys = get_keys(elements)
        normalized = normalize(value, keys, self._guard)
        nodes = get_nodes(normalized)
        with self._guard.registered(nodes):
            class_names = get_class_names_from_nodes(nodes)
            styles = get_pretty_styles_from_class_names(class_names, elements)
            clean(nodes, class_names)
            printed = printer(normalized)

        if is_nested_print:
            return printed
        return replace_class_names(
            class_names,
            styles,
            printed,
            keys,
            self.options.class_name_replacer)


def create_serializer(
        options: SerializerOptions | None=None,
        *, registry: StyleRegistry | None=None,
        class_name_replacer: ClassNameReplacer | None=None,
        dom_elements: bool | None=None,
        ) -> Serializer:
    """
    Creates a serializer.

    Options may be given either as a SerializerOptions or as keyword arguments,
    but not both.
    """
    if options is None:
        options = SerializerOptions(
            class_name_replacer=class_name_replacer,
            dom_elements=dom_elements if dom_elements is not None else True)
    elif class_name_replacer is not None or dom_elements is not None:
        raise ValueError('Cannot specify both options and individual option keywords')
    return Serializer(options, registry)
