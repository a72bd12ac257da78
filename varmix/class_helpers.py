# Copyright (c) 2026 NASK. All rights reserved.


def attr_repr(*attr_names):
    """
    Make a __repr__() implementation based on given attribute names.

    Any number of positional args:
        Names of instance attributes and/or class attributes.

    Returns:
        A function being the requested __repr__() implementation.

    >>> class A(object):
    ...    __repr__ = attr_repr('x', 'y')
    ...    x = 1
    ...    def __init__(self):
    ...        self.y = 'qwerty'
    >>> a = A()
    >>> a
    <A x=1, y='qwerty'>
    """
    format_repr = ('<{0.__class__.__qualname__} ' +
                   ', '.join('%s={0.%s!r}' % (name, name)
                             for name in attr_names) +
                   '>').format
    format_repr_fallback = object.__repr__

    def __repr__(self):
        # noinspection PyBroadException
        try:
            return format_repr(self)
        except Exception:
            return format_repr_fallback(self)

    return __repr__


def get_class_name(instance_or_class):
    """
    Gen the name of the given class or of the class of the given instance.

    >>> class SpamHam: pass
    >>> s = SpamHam()
    >>> get_class_name(SpamHam)
    'SpamHam'
    >>> get_class_name(s)
    'SpamHam'
    """
    return (
        instance_or_class.__name__
        if isinstance(instance_or_class, type)
        else instance_or_class.__class__.__name__)


def get_type_name(type_hint):
    """
    Get a human-readable name of the given class or `typing` construct.

    >>> get_type_name(int)
    'int'
    >>> get_type_name(list[int])
    'list[int]'
    >>> get_type_name(type(None))
    'None'
    """
    if type_hint is type(None):
        return 'None'
    if isinstance(type_hint, type) and not getattr(type_hint, '__args__', None):
        return type_hint.__qualname__
    return repr(type_hint)
