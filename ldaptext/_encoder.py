"""
    Encoding / decoding utilities
"""


def to_bytes(value):
    """
    Converts value to its bytes representation:

    * Uses value`s toWire method if it has one
    * Encodes to utf-8 if the value is a unicode string, undecodable
      bytes smuggled in as surrogates are restored as they were
    * Otherwise wraps value into bytes()
    """
    if hasattr(value, "toWire"):
        return value.toWire()
    if isinstance(value, int):
        return str(value).encode("utf-8")
    if isinstance(value, str):
        return value.encode("utf-8", "surrogateescape")
    return bytes(value)


def to_unicode(value):
    """
    Converts string to unicode:

    * Decodes value from utf-8 if it is a byte string; bytes which
      are not utf-8 are kept as surrogates so that to_bytes gives
      them back unchanged
    * Otherwise just returns the same value
    """
    if isinstance(value, bytes):
        return value.decode("utf-8", "surrogateescape")
    return value

