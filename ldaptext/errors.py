"""
Error taxonomy shared by every parser of this package.

All parsers fail fast: the first problem found aborts the parse and is
raised as one of the classes below (or a more specific subclass living
next to the code that detects it).  The docstring of each class is its
human readable message.
"""


class ParseError(Exception):
    """Error parsing directory text"""

    def __init__(self, *args, lineNumber=None):
        Exception.__init__(self, *args)
        self.lineNumber = lineNumber

    def __str__(self):
        s = self.__doc__.strip().splitlines()[0].rstrip(".")
        parts = []
        if self.lineNumber is not None:
            parts.append("line %d" % self.lineNumber)
        parts.extend(str(arg) for arg in self.args)
        if parts:
            s = ": ".join([s] + parts)
        return s + "."


class StructuralError(ParseError):
    """Malformed directory text"""


class EncodingError(ParseError):
    """Invalid encoded value"""


class SemanticError(ParseError):
    """Unusable directory text"""
