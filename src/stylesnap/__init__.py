"""
Snapshot serializer that prints trees of styled elements together with
the CSS they use, under stable class names.

Example:
    from stylesnap import create_serializer
    from stylesnap.printer import format_snapshot
    
    snapshot = format_snapshot(tree, [create_serializer()])
"""

from stylesnap.serializer import Serializer, SerializerOptions, create_serializer

default_serializer = create_serializer()

test = default_serializer.test
print = default_serializer.print  # pylint: disable=redefined-builtin

__all__ = [
    'Serializer',
    'SerializerOptions',
    'create_serializer',
    'default_serializer',
    'print',
    'test',
]
