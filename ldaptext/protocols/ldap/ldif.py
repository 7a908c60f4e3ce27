"""
Support for writing LDIF records and files.
You probably want to use this only indirectly, as in
LDIFRecord(...).toWire().
"""

# RFC2849: The LDAP Data Interchange Format (LDIF) - Technical Specification

import base64

from ldaptext import config
from ldaptext._encoder import to_bytes


def base64_encode(s):
    return b"".join(base64.encodebytes(s).split(b"\n"))


def containsNonprintable(s):
    for i in range(len(s)):
        c = s[i : i + 1]
        if ord(c) > 127 or c == b"\0" or c == b"\n" or c == b"\r":
            return True
    return False


def needsBase64(value):
    return (
        value.startswith(b"\0")
        or value.startswith(b"\n")
        or value.startswith(b"\r")
        or value.startswith(b" ")
        or value.startswith(b":")
        or value.startswith(b"<")
        or value.endswith(b" ")
        or containsNonprintable(value)
    )


def foldLine(line, width):
    """
    Fold one logical line (without its line break) so that no physical
    line is longer than width bytes.
    """
    if width == 1:
        raise ValueError("cannot fold lines to a single byte")
    if not width or len(line) <= width:
        return line + b"\n"
    r = [line[:width]]
    line = line[width:]
    while line:
        r.append(b" " + line[: width - 1])
        line = line[width - 1 :]
    return b"\n".join(r) + b"\n"


def attributeAsLDIF(attribute, value, foldWidth=None):
    if foldWidth is None:
        foldWidth = config.getFoldWidth()
    attribute = to_bytes(attribute)
    value = to_bytes(value)
    if needsBase64(value):
        line = b"%s:: %s" % (attribute, base64_encode(value))
    else:
        line = b"%s: %s" % (attribute, value)
    return foldLine(line, foldWidth)


def asLDIF(record, foldWidth=None):
    """
    Serialize a record; plain records list their attributes, change
    records their change-sets separated by C{-} lines.
    """
    if foldWidth is None:
        foldWidth = config.getFoldWidth()
    r = [attributeAsLDIF(b"dn", record.dn, foldWidth)]
    for control in record.controls:
        r.append(attributeAsLDIF(b"control", control, foldWidth))
    if record.changetype is None:
        for k, vs in record.attributes.items():
            for v in vs:
                r.append(attributeAsLDIF(k, v, foldWidth))
    else:
        r.append(attributeAsLDIF(b"changetype", record.changetype, foldWidth))
        for i, changeset in enumerate(record.changesets):
            if i > 0 and record.changetype != "modify":
                r.append(b"-\n")
            for k, vs in changeset.items():
                for v in vs:
                    r.append(attributeAsLDIF(k, v, foldWidth))
            if record.changetype == "modify":
                r.append(b"-\n")
    r.append(b"\n")
    return b"".join(r)


def _header(version):
    return b"version: %d\n\n" % version


def manyAsLDIF(records, version=1, foldWidth=None):
    s = []
    if version is not None:
        s.append(_header(version))
    for record in records:
        s.append(asLDIF(record, foldWidth))
    return b"".join(s)
