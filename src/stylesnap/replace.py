"""
Replaces generated class names with deterministic aliases.
"""

from collections.abc import Callable
import re

ClassNameReplacer = Callable[[str, int], str]

# Class names generated to target a styled component from another style's selector
_COMPONENT_SELECTOR_CLASS_NAME_RE = re.compile(r'^e[a-zA-Z0-9]+[0-9]+$')


def default_class_name_replacer(class_name: str, index: int) -> str:
    """
    Aliases a class name as its key-prefix followed by its discovery index.

    For example the third replaced class name, "css-1x2y3z", becomes "css-2".
    """
    (prefix, sep, _) = class_name.partition('-')
    return f'{prefix}-{index}' if sep != '' else f'{class_name}-{index}'


def replace_class_names(
        class_names: list[str],
        styles: str,
        code: str,
        keys: list[str],
        replacer: ClassNameReplacer | None=None,
        ) -> str:
    """
    Joins the formatted `styles` and printed `code` into a single snapshot,
    replacing every generated class name in both with an alias.

    Aliases are assigned in the order given, so the same discovery order
    always yields the same aliases.

    Arguments:
    * class_names -- class names present in `code`, in discovery order.
    * keys -- key-prefixes of the style registry. Only class names
      starting with one of these prefixes are replaced.
    * replacer -- function that returns the alias for a class name
      given its index among replaced class names.
    """
    if replacer is None:
        replacer = default_class_name_replacer
    key_pattern = (
        re.compile('^(?:' + '|'.join(re.escape(k) for k in keys) + ')-')
        if len(keys) > 0
        else None
    )

    result = styles + ('\n\n' if styles != '' else '') + code
    aliases = {}  # type: dict[str, str]
    for class_name in class_names:
        is_generated = (
            (key_pattern is not None and key_pattern.match(class_name) is not None) or
            _COMPONENT_SELECTOR_CLASS_NAME_RE.match(class_name) is not None
        )
        if is_generated and class_name not in aliases:
            aliases[class_name] = replacer(class_name, len(aliases))
    if len(aliases) == 0:
        return result

    # NOTE: Replace all class names in a single pass. An alias may coincide
    #       with a generated class name that has not been replaced yet.
    #       Don't replace a class name that is only part of a longer one.
    class_names_re = re.compile(
        r'(?<![\w-])(?:' +
        '|'.join(re.escape(c) for c in sorted(aliases, key=len, reverse=True)) +
        r')(?![\w-])')
    return class_names_re.sub(lambda m: aliases[m.group(0)], result)
