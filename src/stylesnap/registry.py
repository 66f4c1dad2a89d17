"""
Runtime style registry.

Accumulates raw CSS rule text as styles are inserted while rendering,
grouped by key-prefix. Each key-prefix identifies one independent style cache
and is the prefix of every class name generated by that cache.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import re
from stylesnap.model import StyleDescriptor
from stylesnap.util.xcollections.dedup import dedup_list
import zlib

_KEY_RE = re.compile(r'^[a-z-]+$')

DEFAULT_KEY = 'css'


@dataclass(frozen=True)
class StyleElement:
    """The raw CSS text of one inserted rule, tagged with its key-prefix."""
    key: str
    text: str


# ------------------------------------------------------------------------------
# Descriptors

def css(styles: str, label: str | None=None) -> StyleDescriptor:
    """
    Creates a style descriptor whose name is a stable hash of `styles`,
    suffixed with `label` if provided.
    """
    name = _base36(zlib.crc32(styles.encode('utf-8')))
    if label is not None:
        name = f'{name}-{label}'
    return StyleDescriptor(name, styles)


def _base36(n: int) -> str:
    digits = '0123456789abcdefghijklmnopqrstuvwxyz'
    if n == 0:
        return '0'
    chars = []
    while n > 0:
        (n, r) = divmod(n, 36)
        chars.append(digits[r])
    return ''.join(reversed(chars))


# ------------------------------------------------------------------------------
# StyleSheet, StyleRegistry

class StyleSheet:
    """An independent style cache whose class names all start with `key-`."""

    def __init__(self, key: str) -> None:
        if not _KEY_RE.fullmatch(key):
            raise ValueError(
                f'Style sheet key must contain only lowercase letters and "-": {key!r}')
        self.key = key
        self._rules = {}  # type: dict[str, str]

    def insert(self, descriptor: StyleDescriptor) -> str:
        """
        Inserts the rule for `descriptor` if not already inserted,
        returning the class name that selects it.
        """
        class_name = f'{self.key}-{descriptor.name}'
        if descriptor.name not in self._rules:
            self._rules[descriptor.name] = f'.{class_name}{{{descriptor.styles}}}'
        return class_name

    def elements(self) -> list[StyleElement]:
        return [StyleElement(self.key, text) for text in self._rules.values()]

    def clear(self) -> None:
        self._rules.clear()


class StyleRegistry:
    def __init__(self) -> None:
        self._sheets = {}  # type: dict[str, StyleSheet]

    def sheet(self, key: str=DEFAULT_KEY) -> StyleSheet:
        sheet = self._sheets.get(key)
        if sheet is None:
            sheet = self._sheets[key] = StyleSheet(key)
        return sheet

    def insert(self, descriptor: StyleDescriptor, key: str=DEFAULT_KEY) -> str:
        return self.sheet(key).insert(descriptor)

    def get_style_elements(self) -> list[StyleElement]:
        """Returns a snapshot of all inserted rules, in insertion order per sheet."""
        return [e for sheet in self._sheets.values() for e in sheet.elements()]

    def reset(self) -> None:
        self._sheets.clear()


default_registry = StyleRegistry()


# ------------------------------------------------------------------------------
# Queries

def get_style_elements(registry: StyleRegistry | None=None) -> list[StyleElement]:
    if registry is None:
        registry = default_registry
    return registry.get_style_elements()


def get_keys(elements: Iterable[StyleElement]) -> list[str]:
    return dedup_list(e.key for e in elements)


def get_styles_from_class_names(
        class_names: list[str],
        elements: list[StyleElement],
        ) -> str:
    """
    Returns the concatenated raw CSS of every registered rule that
    selects at least one of the specified class names.

    Class names that do not start with a registered key-prefix are ignored.
    """
    if len(class_names) == 0:
        return ''
    keys = get_keys(elements)
    if len(keys) == 0:
        return ''
    key_pattern = re.compile('^(?:' + '|'.join(re.escape(k) for k in keys) + ')-')
    filtered_class_names = [c for c in class_names if key_pattern.match(c)]
    if len(filtered_class_names) == 0:
        return ''
    # NOTE: A class name must not match merely as a prefix of a longer one
    selector_pattern = re.compile(
        r'\.(?:' + '|'.join(re.escape(c) for c in filtered_class_names) + r')(?![\w-])')
    return ''.join([
        e.text for e in elements
        if selector_pattern.search(e.text) is not None
    ])
