# Copyright (c) 2026 NASK. All rights reserved.


def ascii_str(obj):

    r"""
    Safely convert the given object to an ASCII-only `str`.

    This function does its best to obtain a string representation
    (possibly `str`-like or `bytes`-like converted to str, though
    `repr()` can also be used as the last-resort fallback) and then
    escaping any non-ASCII characters -- *not raising* any
    encoding/decoding exceptions.

    The result is an ASCII `str`, with non-ASCII characters escaped
    using Python literal notation (``\x...``, ``\u...``, ``\U...``).

    >>> ascii_str('')
    ''
    >>> ascii_str(b'')
    ''
    >>> ascii_str('Ala ma kota\nA kot?\n2=2 ')   # pure ASCII str => unchanged
    'Ala ma kota\nA kot?\n2=2 '
    >>> ascii_str(b'Ala ma kota\nA kot?\n2=2 ')
    'Ala ma kota\nA kot?\n2=2 '

    >>> ascii_str('Ech, ale błąd!')       # non-pure-ASCII-str => escaped
    'Ech, ale b\\u0142\\u0105d!'
    >>> ascii_str(b'Ech, ale b\xc5\x82\xc4\x85d!')   # UTF-8 bytes => decoded + escaped
    'Ech, ale b\\u0142\\u0105d!'

    >>> ascii_str(ValueError('Ech, ale błąd!'))
    'Ech, ale b\\u0142\\u0105d!'
    >>> ascii_str(42)
    '42'

    >>> class Nasty(object):
    ...     def __str__(self): raise ValueError
    ...     def __repr__(self): return u'really nasŧy!!!'
    ...
    >>> ascii_str(Nasty())
    'really nas\\u0167y!!!'
    """
    if isinstance(obj, str):
        s = obj
    else:
        if isinstance(obj, memoryview):
            obj = bytes(obj)
        if isinstance(obj, (bytes, bytearray)):
            s = obj.decode('utf-8', 'surrogateescape')
        else:
            try:
                s = str(obj)
            except ValueError:
                s = repr(obj)
    return s.encode('ascii', 'backslashreplace').decode('ascii')


def str_to_bool(s):
    """
    Return True or False, given one of the known strings (see examples below).

    >>> str_to_bool('1')
    True
    >>> str_to_bool('y')
    True
    >>> str_to_bool('yes')
    True
    >>> str_to_bool('Yes')  # note: checks are case-insensitive
    True
    >>> str_to_bool('t')
    True
    >>> str_to_bool('true')
    True
    >>> str_to_bool('on')
    True

    >>> str_to_bool('0')
    False
    >>> str_to_bool('n')
    False
    >>> str_to_bool('nO')
    False
    >>> str_to_bool('f')
    False
    >>> str_to_bool('false')
    False
    >>> str_to_bool('off')
    False

    Other string values cause ValueError:

    >>> str_to_bool('unknown')        # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    ValueError: ...
    >>> str_to_bool('')               # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    ValueError: ...

    Non-str values cause TypeError:

    >>> str_to_bool(b'yes')  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    TypeError: ...
    >>> str_to_bool(True)             # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    TypeError: ...
    """
    if not isinstance(s, str):
        raise TypeError('{!a} is not a str'.format(s))
    s_lowercased = s.lower()
    try:
        return str_to_bool.LOWERCASE_TO_BOOL[s_lowercased]
    except KeyError:
        raise ValueError(str_to_bool.PUBLIC_MESSAGE_PATTERN.format(
            ascii_str(s)).rstrip('.')) from None

str_to_bool.LOWERCASE_TO_BOOL = {
    '1': True,
    'y': True,
    'yes': True,
    't': True,
    'true': True,
    'on': True,

    '0': False,
    'n': False,
    'no': False,
    'f': False,
    'false': False,
    'off': False,
}

str_to_bool.PUBLIC_MESSAGE_PATTERN = (
    '"{}" is not a valid YES/NO flag (expected one of: %s; or a '
    'variant of any of them with some letters upper-cased).' % (
        ', '.join('"{}"'.format(k) for k, v in sorted(
            str_to_bool.LOWERCASE_TO_BOOL.items(),
            key=lambda item: (item[1], item[0])))))


if __name__ == "__main__":
    import doctest
    doctest.testmod()
