"""
    Test cases for ldaptext.protocols.ldap.ldif module
"""

import base64

from twisted.trial import unittest

from ldaptext import config
from ldaptext.entry import InterchangeFile, LDIFRecord
from ldaptext.protocols.ldap import ldifprotocol
from ldaptext.protocols.ldap.ldif import (
    asLDIF,
    attributeAsLDIF,
    foldLine,
    manyAsLDIF,
)


def encode(value):
    return b"".join(base64.encodebytes(value).split(b"\n"))


class WireableObject:
    """
    Object with bytes representation as a constant toWire value
    """

    def toWire(self):
        return b"wire"


class DefaultConfigMixin:
    def setUp(self):
        config.loadConfig(configFiles=[], reload=True)
        self.addCleanup(config.loadConfig, configFiles=[], reload=True)


class AttributeAsLDIFTests(DefaultConfigMixin, unittest.TestCase):
    """
    Converting pairs of attribute keys and values to LDIF.
    The result is a byte string with key and value
    separated by a colon and a space.
    In several special cases value is base64 encoded and separated
    from key by two colons and a space.
    """

    def test_byte_string(self):
        """Key and value are byte strings"""
        result = attributeAsLDIF(b"some key", b"some value")
        self.assertEqual(result, b"some key: some value\n")

    def test_unicode_string(self):
        """Key and value are unicode strings"""
        result = attributeAsLDIF("another key", "another value")
        self.assertEqual(result, b"another key: another value\n")

    def test_wireable_object(self):
        """Value is an object with toWire method returning its bytes representation"""
        result = attributeAsLDIF("dn", WireableObject())
        self.assertEqual(result, b"dn: wire\n")

    def test_startswith_special_character(self):
        """
        Value is a string starting with one of the reserved characters.
        Returned value is base64 encoded.
        """
        for c in b"\0", b"\n", b"\r", b" ", b":", b"<":

            value = c + b"value"
            result = attributeAsLDIF(b"key", value)
            self.assertEqual(result, b"key:: %s\n" % encode(value))

    def test_endswith_space(self):
        value = b"value "
        result = attributeAsLDIF(b"key", value)
        self.assertEqual(result, b"key:: %s\n" % encode(value))

    def test_contains_special_characters(self):
        """
        Value is a string with one of the reserved characters
        somewhere in its middle.
        Returned value is base64 encoded.
        """
        for c in b"\0", b"\n", b"\r":

            value = b"foo" + c + b"bar"
            result = attributeAsLDIF(b"key", value)
            self.assertEqual(result, b"key:: %s\n" % encode(value))

    def test_contains_nonprintable_characters(self):
        """
        Value is a string containing nonprintable characters.
        Returned value is base64 encoded.
        """
        result = attributeAsLDIF(b"key", b"val\xFFue")
        self.assertEqual(result, b"key:: %s\n" % encode(b"val\xFFue"))

    def test_undecodable_text(self):
        """
        Text holding bytes that were not utf-8 gives back those bytes.
        """
        value = b"\xff\xd8".decode("utf-8", "surrogateescape")
        result = attributeAsLDIF("jpegPhoto", value)
        self.assertEqual(result, b"jpegPhoto:: /9g=\n")

    def test_folding(self):
        """
        Lines longer than the fold width are continued on lines
        starting with a space.
        """
        result = attributeAsLDIF("description", "x" * 20, foldWidth=10)
        self.assertEqual(result, b"descriptio\n n: xxxxxx\n xxxxxxxxx\n xxxxx\n")

    def test_default_fold_width(self):
        result = attributeAsLDIF("description", "x" * 100)
        lines = result.split(b"\n")
        self.assertEqual(len(lines[0]), 76)
        self.assertTrue(lines[1].startswith(b" "))

    def test_fold_width_from_config(self):
        path = self.mktemp()
        with open(path, "wb") as f:
            f.write(b"[ldif]\nfold-width = 0\n")
        config.loadConfig(configFiles=[path], reload=True)

        result = attributeAsLDIF("description", "x" * 100)

        self.assertEqual(result, b"description: " + b"x" * 100 + b"\n")


class FoldLineTests(unittest.TestCase):
    def test_short(self):
        self.assertEqual(foldLine(b"abc", 3), b"abc\n")

    def test_no_folding(self):
        self.assertEqual(foldLine(b"abcdef", 0), b"abcdef\n")

    def test_continuation_lines_count_their_space(self):
        self.assertEqual(foldLine(b"abcdefg", 3), b"abc\n de\n fg\n")

    def test_width_one(self):
        self.assertRaises(ValueError, foldLine, b"abc", 1)


class AsLDIFTests(DefaultConfigMixin, unittest.TestCase):
    """
    Converting records to LDIF.
    The result is a number of lines in LDIF format for every key/value pair
    including DN, ended by an empty line.
    """

    def test_unicode_string(self):
        """DN and attribute keys and values are unicode string"""
        record = LDIFRecord(
            dn="entry",
            attributes={"key1": ["value11", "value12"], "key2": ["value21", "value22"]},
        )
        result = asLDIF(record)
        self.assertEqual(
            result,
            b"""\
dn: entry
key1: value11
key1: value12
key2: value21
key2: value22

""",
        )

    def test_modify(self):
        record = LDIFRecord(
            dn="cn=foo,dc=example,dc=com",
            changetype="modify",
            changesets=[
                {"add": ["mail"], "mail": ["foo@example.com"]},
                {"delete": ["description"]},
            ],
        )
        self.assertEqual(
            asLDIF(record),
            b"""\
dn: cn=foo,dc=example,dc=com
changetype: modify
add: mail
mail: foo@example.com
-
delete: description
-

""",
        )

    def test_add(self):
        """
        A single change-set needs no separator.
        """
        record = LDIFRecord(
            dn="cn=foo,dc=example,dc=com",
            changetype="add",
            changesets=[{"objectClass": ["person"], "cn": ["foo"]}],
        )
        self.assertEqual(
            asLDIF(record),
            b"""\
dn: cn=foo,dc=example,dc=com
changetype: add
objectClass: person
cn: foo

""",
        )

    def test_delete_with_control(self):
        record = LDIFRecord(
            dn="cn=foo,dc=example,dc=com",
            changetype="delete",
            controls=["1.2.840.113556.1.4.805 true"],
        )
        self.assertEqual(
            asLDIF(record),
            b"""\
dn: cn=foo,dc=example,dc=com
control: 1.2.840.113556.1.4.805 true
changetype: delete

""",
        )

    def test_to_wire(self):
        record = LDIFRecord(dn="cn=foo", attributes={"cn": ["foo"]})
        self.assertEqual(record.toWire(), b"dn: cn=foo\ncn: foo\n\n")
        self.assertEqual(record.getLDIF(), "dn: cn=foo\ncn: foo\n\n")


class ManyAsLDIFTests(DefaultConfigMixin, unittest.TestCase):
    """
    Converting multiple records to LDIF.
    The result is a number of blocks representing each record in LDIF
    format separated by empty lines, after a version header separated
    from other blocks by an empty line.
    """

    def test_multiple_objects(self):
        records = [
            LDIFRecord(
                dn="object1",
                attributes={"foo1": ["value11", "value12"], "foo2": ["value21"]},
            ),
            LDIFRecord(dn="object2", attributes={"bar1": ["value31"]}),
        ]
        result = manyAsLDIF(records)
        self.assertEqual(
            result,
            b"""\
version: 1

dn: object1
foo1: value11
foo1: value12
foo2: value21

dn: object2
bar1: value31

""",
        )

    def test_without_version(self):
        records = [LDIFRecord(dn="object1", attributes={"foo": ["bar"]})]
        self.assertEqual(manyAsLDIF(records, version=None), b"dn: object1\nfoo: bar\n\n")


class RoundTripTests(DefaultConfigMixin, unittest.TestCase):
    """
    What the writer produces parses back to the same records.
    """

    def roundTrip(self, text):
        parsed = ldifprotocol.fromLDIFString(text)
        again = ldifprotocol.fromLDIFString(parsed.toWire())
        self.assertEqual(again, parsed)
        return again

    def test_entries(self):
        result = self.roundTrip(
            """\
version: 1
dn: cn=Barbara Jensen, ou=Product Development, dc=airius, dc=com
objectclass: top
objectclass: person
cn: Barbara Jensen
cn: Babs Jensen
description:: IGxlYWRpbmcgc3BhY2U=
description: %s
jpegPhoto:: /9j/4AAQSkZJRgABAQEASABIAAD/2wBDAAEBAQEBAQEBAQEBAQ==

dn: cn=café, dc=airius, dc=com
cn: café
"""
            % ("y" * 200,)
        )
        self.assertEqual(len(result), 2)
        self.assertEqual(result.version, 1)
        self.assertEqual(result.records[0].attributes["description"][1], "y" * 200)

    def test_changes(self):
        result = self.roundTrip(
            """\
dn: cn=foo,dc=example,dc=com
control: 1.3.6.1.1.12 true:: KGNuPWZvbyk=
changetype: modify
add: mail
mail: foo@example.com
-
replace: cn
cn: bar

dn: cn=bar,dc=example,dc=com
changetype: moddn
newrdn: cn=baz
deleteoldrdn: 1
"""
        )
        self.assertTrue(result.isChangesSet())
        self.assertEqual(len(result.records[0].changesets), 2)

    def test_interchange_file(self):
        original = InterchangeFile(
            changes=False,
            records=[LDIFRecord(dn="cn=foo", attributes={"cn": [" foo"]})],
        )
        self.assertEqual(ldifprotocol.fromLDIFString(original.toWire()), original)
