from stylesnap import create_serializer, SerializerOptions
from stylesnap.css import StyleParseError
from stylesnap.dom import HTML_PARSER_TYPE_CHOICES, parse_html_fragment
from stylesnap.model import (
    Component, Element, StyleDescriptor, UnresolvableElementTypeError,
    style_prop_element,
)
from stylesnap.printer import format_snapshot, make_printer
from stylesnap.registry import StyleRegistry
from textwrap import dedent
from typing import Any, List

_RED = StyleDescriptor('abc', 'color:red;')


# === Tests: End-to-End Scenarios ===

def test_plain_element_without_registered_styles_is_printed_unchanged() -> None:
    registry = StyleRegistry()
    tree = Element('div', {'className': 'x'})

    assert dedent(
        """
        <div
          className="x"
        />
        """
    ).strip('\n') == _snapshot(tree, registry)


def test_style_prop_element_with_rendered_children_is_replaced_by_its_children() -> None:
    registry = StyleRegistry()
    registry.insert(_RED)
    tree = style_prop_element('span', _RED, shallow=True, children=[
        Element('span', {'className': 'css-abc'}, ['hello']),
    ])

    assert dedent(
        """
        .css-0 {
          color: red;
        }

        <span
          className="css-0"
        >
          hello
        </span>
        """
    ).strip('\n') == _snapshot(tree, registry)


def test_shallow_style_prop_element_is_given_synthesized_class_name_and_resolved_type() -> None:
    registry = StyleRegistry()
    registry.insert(_RED)
    tree = style_prop_element('span', _RED, shallow=True, children=['hello'])

    assert dedent(
        """
        .css-0 {
          color: red;
        }

        <span
          className="css-0"
        >
          hello
        </span>
        """
    ).strip('\n') == _snapshot(tree, registry)


def test_empty_class_name_is_removed() -> None:
    registry = StyleRegistry()
    tree = Element('div', {'className': ''})

    assert '<div />' == _snapshot(tree, registry)


def test_primitive_is_not_accepted_but_prints_unprocessed() -> None:
    serializer = create_serializer(registry=StyleRegistry())

    assert False == serializer.test('hello')
    assert '"hello"' == serializer.print('hello', make_printer())


def test_malformed_css_for_referenced_class_name_raises_error_naming_the_css(capsys) -> None:
    registry = StyleRegistry()
    registry.insert(StyleDescriptor('bad', 'color red;'))
    tree = Element('div', {'className': 'css-bad'})

    try:
        _snapshot(tree, registry)
    except StyleParseError as e:
        assert '.css-bad{color red;}' == e.css
        assert 'There was an error parsing the following css: ".css-bad{color red;}"' == str(e)
    else:
        raise AssertionError('Expected StyleParseError')
    assert 'Unable to parse CSS' in capsys.readouterr().err


# === Tests: Normalization ===

def test_discarded_wrapper_children_become_siblings() -> None:
    registry = StyleRegistry()
    registry.insert(_RED)
    tree = Element('div', {}, [
        style_prop_element('span', _RED, shallow=True, children=[
            Element('span', {'className': 'css-abc'}),
            Element('b', {'className': 'css-abc other'}),
        ]),
    ])

    assert dedent(
        """
        .css-0 {
          color: red;
        }

        <div>
          <span
            className="css-0"
          />
          <b
            className="css-0 other"
          />
        </div>
        """
    ).strip('\n') == _snapshot(tree, registry)


def test_shallow_element_wrapping_component_uses_component_name() -> None:
    class FancyButton:
        pass

    registry = StyleRegistry()
    registry.insert(_RED)
    for (wrapped_type, expected_name) in [
            (FancyButton, 'FancyButton'),
            (Component('Card'), 'Card')]:
        tree = style_prop_element(wrapped_type, _RED, {'className': 'own'}, shallow=True)

        assert dedent(
            f"""
            .css-0 {{
              color: red;
            }}

            <{expected_name}
              className="own css-0"
            />
            """
        ).strip('\n') == _snapshot(tree, registry)


def test_shallow_element_wrapping_unnamed_type_raises_error() -> None:
    registry = StyleRegistry()
    registry.insert(_RED)
    tree = style_prop_element(object(), _RED, shallow=True)

    try:
        _snapshot(tree, registry)
    except UnresolvableElementTypeError:
        pass  # expected
    else:
        raise AssertionError('Expected UnresolvableElementTypeError')


def test_unrendered_style_prop_element_takes_wrapped_type_and_shows_unknown_styles() -> None:
    registry = StyleRegistry()
    registry.insert(_RED)
    tree = style_prop_element('div', _RED, {'id': 'main'})

    assert dedent(
        """
        <div
          css="unknown styles"
          id="main"
        />
        """
    ).strip('\n') == _snapshot(tree, registry)


def test_element_embedded_in_props_shares_css_block_and_aliases() -> None:
    registry = StyleRegistry()
    registry.insert(_RED)
    tree = Element('div', {
        'className': 'css-abc',
        'render': Element('span', {'className': 'css-abc'}),
    })

    assert dedent(
        """
        .css-0 {
          color: red;
        }

        <div
          className="css-0"
          render={<span
            className="css-0"
          />}
        />
        """
    ).strip('\n') == _snapshot(tree, registry)


def test_print_does_not_mutate_input_tree() -> None:
    registry = StyleRegistry()
    registry.insert(_RED)
    child = Element('p', {'className': ''}, ['text'])
    wrapper = style_prop_element('span', _RED, shallow=True, children=[child])
    tree = Element('div', {}, [wrapper])
    wrapper_props_before = dict(wrapper.props)

    _snapshot(tree, registry)

    assert {'className': ''} == child.props
    assert wrapper_props_before == wrapper.props
    assert [wrapper] == tree.children
    assert 'StylePropInternal' == wrapper.type


# === Tests: Re-entrancy ===

def test_nested_print_of_already_printed_node_returns_raw_text_without_css() -> None:
    registry = StyleRegistry()
    registry.insert(_RED)
    serializer = create_serializer(registry=registry)
    inner_printer = make_printer()
    nested_results = []  # type: List[str]

    def host_printer(value: Any) -> str:
        nested_results.append(serializer.print(value, inner_printer))
        return inner_printer(value)

    tree = Element('div', {'className': 'css-abc'})
    result = serializer.print(tree, host_printer)

    assert [dedent(
        """
        <div
          className="css-abc"
        />
        """
    ).strip('\n')] == nested_results
    assert 1 == result.count('color: red;')


def test_test_rejects_none_primitives_and_nodes_being_printed() -> None:
    registry = StyleRegistry()
    serializer = create_serializer(registry=registry)
    tested = []  # type: List[bool]

    def host_printer(value: Any) -> str:
        tested.append(serializer.test(value))
        return ''

    assert False == serializer.test(None)
    assert False == serializer.test('hello')
    assert False == serializer.test(42)
    assert True == serializer.test(Element('div'))

    serializer.print(Element('div'), host_printer)
    assert [False] == tested


def test_nodes_are_released_when_host_printer_raises() -> None:
    serializer = create_serializer(registry=StyleRegistry())
    printed_values = []  # type: List[Any]

    def failing_printer(value: Any) -> str:
        printed_values.append(value)
        raise RuntimeError('printer failed')

    try:
        serializer.print(Element('div', {}, [Element('span')]), failing_printer)
    except RuntimeError:
        pass  # expected
    else:
        raise AssertionError('Expected RuntimeError')

    (normalized,) = printed_values
    assert True == serializer.test(normalized)
    assert True == serializer.test(normalized.children[0])


def test_nodes_are_released_after_print_with_nested_prints() -> None:
    serializer = create_serializer(registry=StyleRegistry())
    printed_values = []  # type: List[Any]
    printer = make_printer([serializer])

    def recording_printer(value: Any) -> str:
        printed_values.append(value)
        return serializer.print(value.children[0], printer)

    serializer.print(Element('div', {}, [Element('span')]), recording_printer)

    (normalized,) = printed_values
    assert True == serializer.test(normalized)
    assert True == serializer.test(normalized.children[0])


# === Tests: Aliasing ===

def test_separate_prints_with_same_discovery_order_use_same_aliases() -> None:
    registry = StyleRegistry()
    blue = StyleDescriptor('def', 'color:blue;')
    registry.insert(_RED)
    registry.insert(blue)
    serializer = create_serializer(registry=registry)
    tree = Element('div', {'className': 'css-def'}, [
        Element('span', {'className': 'css-abc'}),
    ])

    first = format_snapshot(tree, [serializer])
    second = format_snapshot(tree, [serializer])

    assert first == second
    assert dedent(
        """
        .css-1 {
          color: red;
        }

        .css-0 {
          color: blue;
        }

        <div
          className="css-0"
        >
          <span
            className="css-1"
          />
        </div>
        """
    ).strip('\n') == first


def test_distinct_class_names_never_share_an_alias() -> None:
    registry = StyleRegistry()
    blue = StyleDescriptor('0', 'color:blue;')
    registry.insert(_RED)
    registry.insert(blue)
    tree = Element('div', {'className': 'css-abc'}, [
        Element('span', {'className': 'css-0'}),
    ])

    assert dedent(
        """
        .css-0 {
          color: red;
        }

        .css-1 {
          color: blue;
        }

        <div
          className="css-0"
        >
          <span
            className="css-1"
          />
        </div>
        """
    ).strip('\n') == _snapshot(tree, registry)


def test_custom_class_name_replacer_is_used() -> None:
    registry = StyleRegistry()
    registry.insert(_RED)
    tree = Element('div', {'className': 'css-abc'})

    assert dedent(
        """
        .red-0 {
          color: red;
        }

        <div
          className="red-0"
        />
        """
    ).strip('\n') == _snapshot(tree, registry, class_name_replacer=lambda c, i: f'red-{i}')


# === Tests: DOM-like Elements ===

def test_dom_elements_are_serialized_with_their_styles() -> None:
    registry = StyleRegistry()
    registry.insert(_RED)
    for parser_type in HTML_PARSER_TYPE_CHOICES:
        tree = parse_html_fragment(
            '<div class="css-abc"><span>hi</span></div>', parser_type)

        assert dedent(
            """
            .css-0 {
              color: red;
            }

            <div
              class="css-0"
            >
              <span>
                hi
              </span>
            </div>
            """
        ).strip('\n') == _snapshot(tree, registry), parser_type


def test_dom_elements_are_ignored_when_disabled() -> None:
    registry = StyleRegistry()
    registry.insert(_RED)
    serializer = create_serializer(
        SerializerOptions(dom_elements=False), registry=registry)
    tree = parse_html_fragment('<div class="css-abc"></div>', 'html_parser')

    assert False == serializer.test(tree)
    assert dedent(
        """
        <div
          class="css-abc"
        />
        """
    ).strip('\n') == format_snapshot(tree, [serializer])


def test_cannot_specify_both_options_and_option_keywords() -> None:
    try:
        create_serializer(SerializerOptions(), dom_elements=False)
    except ValueError:
        pass  # expected
    else:
        raise AssertionError('Expected ValueError')


# === Utility ===

def _snapshot(tree: Any, registry: StyleRegistry, **options: Any) -> str:
    serializer = create_serializer(registry=registry, **options)
    return format_snapshot(tree, [serializer])
