"""
Generic pretty-printer for snapshots of trees of elements.

Elements and DOM-like elements are printed as markup. Lists and dicts
are printed as `Array [...]` and `Object {...}`. Before printing any value
with its built-in rules, the printer offers the value to each plugin,
letting plugins print values (and re-enter the printer) their own way.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from stylesnap.dom import dom_attrs, dom_content, dom_tag_name, is_dom_element
from stylesnap.model import Element, UnresolvableElementTypeError, resolve_element_type_name
import textwrap
from typing import Any, Protocol

Printer = Callable[[Any], str]


class Plugin(Protocol):
    def test(self, value: Any) -> bool:
        ...

    def print(self, value: Any, printer: Printer) -> str:
        ...


def format_snapshot(value: Any, plugins: Iterable[Plugin]=(), *, indent: int=2) -> str:
    return make_printer(plugins, indent=indent)(value)


def make_printer(plugins: Iterable[Plugin]=(), *, indent: int=2) -> Printer:
    """
    Returns a function that prints a value, offering it and
    all values nested inside it to the specified plugins.
    """
    return _Formatter(list(plugins), ' ' * indent).format


class _Formatter:
    def __init__(self, plugins: list[Plugin], indent: str) -> None:
        self._plugins = plugins
        self._indent = indent

    def format(self, value: Any) -> str:
        for plugin in self._plugins:
            if plugin.test(value):
                return plugin.print(value, self.format)

        if isinstance(value, Element):
            return self._format_markup(
                _element_type_name(value.type), value.props, value.children)
        elif is_dom_element(value):
            return self._format_markup(
                dom_tag_name(value), dom_attrs(value), dom_content(value))
        elif isinstance(value, list):
            return self._format_sequence('Array [', value, ']')
        elif isinstance(value, dict):
            return self._format_mapping(value)
        else:
            return _format_primitive(value)

    # === Markup ===

    def _format_markup(self, name: str, props: dict[str, Any], children: list[Any]) -> str:
        lines = ['<' + name]
        for (prop_name, prop_value) in sorted(props.items()):
            if isinstance(prop_value, str):
                printed_value = _format_string(prop_value)
            else:
                printed_value = '{' + self.format(prop_value) + '}'
            lines.append(self._indented(f'{prop_name}={printed_value}'))

        if len(children) == 0:
            if len(lines) == 1:
                return f'<{name} />'
            return '\n'.join(lines + ['/>'])

        if len(lines) == 1:
            lines = [f'<{name}>']
        else:
            lines.append('>')
        for child in children:
            if isinstance(child, str):
                lines.append(self._indented(_escape_text(child)))
            else:
                lines.append(self._indented(self.format(child)))
        lines.append(f'</{name}>')
        return '\n'.join(lines)

    # === Collections ===

    def _format_sequence(self, opener: str, items: list[Any], closer: str) -> str:
        if len(items) == 0:
            return opener + closer
        return '\n'.join([
            opener,
            *[self._indented(self.format(item) + ',') for item in items],
            closer,
        ])

    def _format_mapping(self, mapping: dict[Any, Any]) -> str:
        if len(mapping) == 0:
            return 'Object {}'
        return '\n'.join([
            'Object {',
            *[
                self._indented(f'{self.format(k)}: {self.format(v)},')
                for (k, v) in sorted(mapping.items(), key=lambda kv: str(kv[0]))
            ],
            '}',
        ])

    def _indented(self, text: str) -> str:
        return textwrap.indent(text, self._indent, lambda line: True)


def _element_type_name(element_type: object) -> str:
    try:
        return resolve_element_type_name(element_type)
    except UnresolvableElementTypeError:
        return 'Unknown'


def _format_primitive(value: Any) -> str:
    if value is None:
        return 'null'
    elif value is True:
        return 'true'
    elif value is False:
        return 'false'
    elif isinstance(value, str):
        return _format_string(value)
    else:
        return repr(value)


def _format_string(value: str) -> str:
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"') + '"'


def _escape_text(text: str) -> str:
    return text.replace('<', '&lt;').replace('>', '&gt;')
