"""
LDAP schemas as handled by OpenLDAP's cn=config backend.

A Schema is a named bundle of raw definition strings, read either from
an LDIF file holding one olcSchemaConfig entry or from a classic
slapd.conf style schema file.  Single definitions are broken down into
their keywords by parseDefinition.
"""

import enum
import re

from twisted.python import log
from twisted.python.util import InsensitiveDict

from ldaptext import config, entry, errors, interfaces
from ldaptext._encoder import to_unicode
from ldaptext.protocols.ldap import ldifprotocol


class SchemaParseError(errors.ParseError):
    """Could not parse schema"""


class SchemaDefinitionMissingNameError(SchemaParseError, errors.SemanticError):
    """Schema definition has no NAME"""


class SchemaDefinitionMultipleNamesError(SchemaParseError, errors.SemanticError):
    """Schema definition has several NAMEs"""


class SchemaUnknownGroupError(SchemaParseError, errors.StructuralError):
    """Unknown item type found in schema file"""


class SchemaLDIFContainsChangesError(SchemaParseError, errors.SemanticError):
    """Schema LDIF file contains changes and not records"""


class SchemaLDIFContainsNoEntriesError(SchemaParseError, errors.SemanticError):
    """Schema LDIF file does not contain any entry"""


class SchemaLDIFContainsMultipleEntriesError(SchemaParseError, errors.SemanticError):
    """Schema LDIF file contains several entries"""


class DefinitionValue:
    """
    The value of one keyword of a schema definition: a Scalar, the
    Flag of a keyword given without value, or a ValueList.
    """

    def toPython(self):
        raise NotImplementedError

    def asList(self):
        raise NotImplementedError


class Scalar(DefinitionValue):
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def toPython(self):
        return self.value

    def asList(self):
        return [self.value]

    def __eq__(self, other):
        if not isinstance(other, Scalar):
            return NotImplemented
        return self.value == other.value

    def __hash__(self):
        return hash((Scalar, self.value))

    def __repr__(self):
        return "Scalar(%r)" % (self.value,)


class _Flag(DefinitionValue):
    __slots__ = ()

    def toPython(self):
        return True

    def asList(self):
        return []

    def __repr__(self):
        return "Flag"


Flag = _Flag()


class ValueList(DefinitionValue):
    __slots__ = ("values",)

    def __init__(self, values=()):
        self.values = tuple(values)

    def toPython(self):
        return list(self.values)

    def asList(self):
        return list(self.values)

    def __eq__(self, other):
        if not isinstance(other, ValueList):
            return NotImplemented
        return self.values == other.values

    def __hash__(self):
        return hash((ValueList, self.values))

    def __iter__(self):
        return iter(self.values)

    def __len__(self):
        return len(self.values)

    def __repr__(self):
        return "ValueList(%r)" % (list(self.values),)


KEYWORDS = (
    "NAME",
    "DESC",
    "SUP",
    "STRUCTURAL",
    "ABSTRACT",
    "AUXILIARY",
    "MUST",
    "OBSOLETE",
    "MAY",
    # attribute types
    "EQUALITY",
    "ORDERING",
    "SUBSTR",
    "SYNTAX",
    "SINGLE-VALUE",
    "COLLECTIVE",
    "NO-USER-MODIFICATION",
    "USAGE",
    # DIT content rules
    "AUX",
    "NOT",
)

# these always hold a list, even of one or zero elements
LIST_KEYWORDS = ("MUST", "MAY", "AUX", "NOT")

_extensionRe = re.compile(r"^X-[A-Za-z0-9_-]+$")
_orderingRe = re.compile(r"^\{\d+\}")
_namesRe = re.compile(r"'\s*'")


def _isKeyword(chunk):
    return chunk in KEYWORDS or _extensionRe.match(chunk) is not None


def _value2container(key, value):
    v = value.strip()
    if key == "OID":
        v = v.lstrip("(").strip()
    elif v.startswith("(") and v.endswith(")"):
        v = v[1:-1].strip()

    if v == "":
        container = Flag
    else:
        if v[:1] in ("'", '"'):
            v = v[1:]
        if v[-1:] in ("'", '"'):
            v = v[:-1]
        v = v.rstrip()
        if "$" in v:
            container = ValueList(re.split(r"\s*\$\s*", v))
        else:
            container = Scalar(v)

    if key in LIST_KEYWORDS:
        if container is Flag:
            container = ValueList()
        elif isinstance(container, Scalar):
            container = ValueList([container.value])
    return container


class SchemaDefinition(dict):
    """
    The keywords of one schema definition mapped to their
    DefinitionValue, the numeric OID being stored under C{"OID"}.
    """

    def __init__(self, text):
        dict.__init__(self)
        self.text = text

    def getOID(self):
        value = self.get("OID")
        if isinstance(value, Scalar):
            return value.value
        return None

    def getNames(self):
        value = self.get("NAME")
        if value is None or value is Flag:
            return []
        if isinstance(value, ValueList):
            return list(value.values)
        return _namesRe.split(value.value)

    def getName(self):
        """
        Return the one NAME of the definition.
        """
        names = self.getNames()
        if not names:
            raise SchemaDefinitionMissingNameError(self.text)
        if len(names) > 1:
            raise SchemaDefinitionMultipleNamesError(names, self.text)
        return names[0]

    def toPython(self):
        return {k: v.toPython() for k, v in self.items()}

    def __repr__(self):
        return "{}({})".format(self.__class__.__name__, dict.__repr__(self))


def parseDefinition(text):
    """
    Break an objectclass or attributetype definition into its keywords.

    The text is split on spaces. Every keyword ends the value of the
    previous one; a lone C{(} starts the value over and a lone C{)}
    ends it, words after it being ignored up to the next keyword.
    """
    text = to_unicode(text)
    infos = SchemaDefinition(text)
    key = "OID"
    value = ""

    for chunk in _orderingRe.sub("", text.strip()).split(" "):
        if chunk == "(":
            value = ""
        elif chunk == ")" or _isKeyword(chunk):
            if key is not None:
                infos[key] = _value2container(key, value)
            key = None if chunk == ")" else chunk
            value = ""
        else:
            value += chunk + " "

    # definitions given without their parentheses
    if key is not None:
        infos[key] = _value2container(key, value)
    return infos


class SchemaGroup(enum.Enum):
    """
    The kinds of definitions a schema is made of, by their keyword in
    schema files.
    """

    OBJECT_IDENTIFIER = "objectidentifier"
    LDAP_SYNTAX = "ldapsyntax"
    ATTRIBUTE_TYPE = "attributetype"
    OBJECT_CLASS = "objectclass"
    DIT_CONTENT_RULE = "ditcontentrule"

    @property
    def attribute(self):
        """The olcSchemaConfig attribute holding the group."""
        return _GROUP_ATTRIBUTES[self]


_GROUP_ATTRIBUTES = {
    SchemaGroup.OBJECT_IDENTIFIER: "olcObjectIdentifier",
    SchemaGroup.LDAP_SYNTAX: "olcLdapSyntaxes",
    SchemaGroup.ATTRIBUTE_TYPE: "olcAttributeTypes",
    SchemaGroup.OBJECT_CLASS: "olcObjectClasses",
    SchemaGroup.DIT_CONTENT_RULE: "olcDitContentRules",
}

ATTRIBUTES = tuple(group.attribute for group in SchemaGroup)


class Schema:
    """
    A named schema, as stored in an olcSchemaConfig entry.

    Schemas are not modified once built; the to* methods compute new
    values.
    """

    def __init__(
        self,
        cn="",
        objectIdentifiers=(),
        ldapSyntaxes=(),
        attributeTypes=(),
        objectClasses=(),
        ditContentRules=(),
    ):
        self._cn = cn
        self._groups = {
            SchemaGroup.OBJECT_IDENTIFIER: tuple(objectIdentifiers),
            SchemaGroup.LDAP_SYNTAX: tuple(ldapSyntaxes),
            SchemaGroup.ATTRIBUTE_TYPE: tuple(attributeTypes),
            SchemaGroup.OBJECT_CLASS: tuple(objectClasses),
            SchemaGroup.DIT_CONTENT_RULE: tuple(ditContentRules),
        }

    @property
    def cn(self):
        return self._cn

    @property
    def objectIdentifiers(self):
        return self._groups[SchemaGroup.OBJECT_IDENTIFIER]

    @property
    def ldapSyntaxes(self):
        return self._groups[SchemaGroup.LDAP_SYNTAX]

    @property
    def attributeTypes(self):
        return self._groups[SchemaGroup.ATTRIBUTE_TYPE]

    @property
    def objectClasses(self):
        return self._groups[SchemaGroup.OBJECT_CLASS]

    @property
    def ditContentRules(self):
        return self._groups[SchemaGroup.DIT_CONTENT_RULE]

    def getGroup(self, group):
        return self._groups[SchemaGroup(group)]

    def toModReplaceArray(self, attrs):
        """
        Return the attributes to replace on an existing schema entry
        whose current attributes are attrs.  Groups that are empty on
        both sides are left alone, groups only present on the server
        get emptied.
        """
        attrs = InsensitiveDict(attrs)
        result = {}
        for group in SchemaGroup:
            values = self._groups[group]
            if attrs.get(group.attribute) or values:
                result[group.attribute] = list(values)
        return result

    def toAddArray(self):
        """
        Return the attributes of a new entry holding this schema.
        """
        result = {}
        for group in SchemaGroup:
            values = self._groups[group]
            if values:
                result[group.attribute] = list(values)
        result["cn"] = [self._cn]
        result["objectClass"] = ["olcSchemaConfig"]
        return result

    def computeDn(self, base=None):
        if base is None:
            base = config.getSchemaBase()
        return "cn=%s,%s" % (self._cn, base)

    def toLDIFRecord(self, base=None):
        return entry.LDIFRecord(dn=self.computeDn(base), attributes=self.toAddArray())

    def _definitionsByName(self, group):
        result = {}
        for text in self._groups[group]:
            definition = parseDefinition(text)
            result[definition.getName()] = definition
        return result

    def getObjectClasses(self):
        """
        Return the object classes of the schema parsed, by name.
        """
        return self._definitionsByName(SchemaGroup.OBJECT_CLASS)

    def getAttributeTypes(self):
        return self._definitionsByName(SchemaGroup.ATTRIBUTE_TYPE)

    def installInto(self, transport, base=None):
        """
        Store the schema in a directory, replacing the existing schema
        of the same name.

        @param transport: an IDirectoryTransport.

        @return: True if the schema entry was created, False if it was
        replaced.
        """
        transport = interfaces.IDirectoryTransport(transport)
        dn = self.computeDn(base)
        found = transport.search(
            dn, "(objectClass=olcSchemaConfig)", list(ATTRIBUTES), scope="base"
        )
        if found:
            existing = next(iter(found.values()))
            transport.replaceAttributes(dn, self.toModReplaceArray(existing))
            log.msg("Replaced schema %s" % (dn,))
            return False
        transport.addEntry(dn, self.toAddArray())
        log.msg("Added schema %s" % (dn,))
        return True

    def __eq__(self, other):
        if not isinstance(other, Schema):
            return NotImplemented
        return self._cn == other._cn and self._groups == other._groups

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        counts = ", ".join(
            "%s=%d" % (group.value, len(self._groups[group])) for group in SchemaGroup
        )
        return "<%s cn=%r %s>" % (self.__class__.__name__, self._cn, counts)


_itemRe = re.compile(r"^(\w+)(.*)$")


def parseSchemaContent(lines):
    """
    Split the lines of a schema file into items.

    A line starting with a word character starts a new item, the word
    naming its kind; any other line continues the current item.

    @return: list of (kind, definition, lineNumber) with kind lower
    cased.
    """
    items = []
    currentName = ""
    currentItem = ""
    currentLine = None
    for lineNumber, line in enumerate(lines, 1):
        line = to_unicode(line).rstrip("\r\n")
        if line.startswith("#") or not line.strip():
            continue
        m = _itemRe.match(line)
        if m is not None:
            if currentName and currentItem.strip():
                items.append((currentName, currentItem.strip(), currentLine))
            currentName = m.group(1).lower()
            currentItem = m.group(2).strip()
            currentLine = lineNumber
        elif not currentName:
            log.msg(
                "Ignoring schema line %d outside of any definition: %r"
                % (lineNumber, line)
            )
        else:
            currentItem += " " + line.strip()
    if currentName and currentItem.strip():
        items.append((currentName, currentItem.strip(), currentLine))
    return items


def _schemaFromItems(cn, items):
    groups = {group: [] for group in SchemaGroup}
    for name, definition, lineNumber in items:
        try:
            group = SchemaGroup(name)
        except ValueError:
            raise SchemaUnknownGroupError(name, lineNumber=lineNumber)
        groups[group].append(definition)
    return Schema(
        cn,
        groups[SchemaGroup.OBJECT_IDENTIFIER],
        groups[SchemaGroup.LDAP_SYNTAX],
        groups[SchemaGroup.ATTRIBUTE_TYPE],
        groups[SchemaGroup.OBJECT_CLASS],
        groups[SchemaGroup.DIT_CONTENT_RULE],
    )


def _schemaFromInterchange(cn, ldifData, source):
    if ldifData.isChangesSet():
        raise SchemaLDIFContainsChangesError(source)
    records = ldifData.getEntries()
    if not records:
        raise SchemaLDIFContainsNoEntriesError(source)
    if len(records) > 1:
        raise SchemaLDIFContainsMultipleEntriesError(source)
    attributes = records[0].attributes
    return Schema(
        attributes.get("cn", [cn])[0],
        *[attributes.get(group.attribute, []) for group in SchemaGroup],
    )


def schemaFromSchemaFile(cn, data):
    """Build a Schema from the content of a slapd.conf style schema file."""
    return _schemaFromItems(cn, parseSchemaContent(to_unicode(data).split("\n")))


def schemaFromLDIF(cn, data):
    """Build a Schema from LDIF holding one olcSchemaConfig entry."""
    return _schemaFromInterchange(cn, ldifprotocol.fromLDIFString(data), "<string>")


def parseSchemaFile(cn, path):
    """
    Read a schema file, LDIF if its name ends with .ldif, schema file
    syntax otherwise.

    @param cn: name of the schema, unless the LDIF entry has its own.
    """
    with open(path, "rb") as f:
        if path.lower().endswith(".ldif"):
            return _schemaFromInterchange(cn, ldifprotocol.fromLDIFFile(f), path)
        return _schemaFromItems(cn, parseSchemaContent(f))
