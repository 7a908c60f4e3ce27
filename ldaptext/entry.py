import base64
import binascii
import collections
import re

from twisted.python.util import InsensitiveDict
from zope.interface import implementer

from ldaptext import errors, interfaces, oid
from ldaptext._encoder import to_unicode
from ldaptext.protocols.ldap import ldif


CHANGETYPES = ("add", "delete", "modify", "moddn", "modrdn")


class LDIFInvalidControlError(errors.StructuralError):
    """Invalid LDIF control specification"""


class LDIFControlExternalReferenceError(errors.SemanticError):
    """References to an external file are not supported"""


LDIFControl = collections.namedtuple(
    "LDIFControl", ["controlType", "criticality", "controlValue"]
)

_controlRe = re.compile(
    r"^(?P<oid>[0-9]+(?:\.[0-9]+)*)"
    r"(?:[ ]+(?P<criticality>true|false))?"
    r"(?:[ ]*(?P<sep>::|:<|:)[ ]*(?P<value>.*))?$"
)


def parseControl(text):
    """
    Split the value of a C{control:} line into an LDIFControl.

    The value is decoded when it was given in base64.
    """
    m = _controlRe.match(text)
    if m is None:
        raise LDIFInvalidControlError(text)
    criticality = m.group("criticality") == "true"
    value = m.group("value")
    sep = m.group("sep")
    if sep == ":<":
        raise LDIFControlExternalReferenceError(text)
    if sep == "::":
        try:
            value = to_unicode(base64.b64decode(value, validate=True))
        except binascii.Error as e:
            raise LDIFInvalidControlError(text) from e
    return LDIFControl(m.group("oid"), criticality, value)


def _folded(mapping):
    return {k.lower(): list(vs) for k, vs in mapping.items()}


@implementer(interfaces.ILDIFRecord)
class LDIFRecord:
    """
    One block of an LDIF file.

    A record holds either plain entry data in C{attributes}, or, when
    it has a C{changetype}, a list of change-sets in C{changesets}.
    Attribute names are case insensitive and keep the spelling they
    were first seen with.
    """

    def __init__(
        self,
        dn=None,
        changetype=None,
        controls=(),
        attributes=None,
        changesets=None,
        lineNumber=None,
    ):
        self.dn = dn
        self.changetype = changetype
        self.controls = list(controls)
        self.attributes = InsensitiveDict()
        self.changesets = []
        self.lineNumber = lineNumber
        self._changesetOpen = False

        if attributes is not None:
            for k, vs in attributes.items():
                for v in vs:
                    self.addAttributeValue(k, v)
        if changesets is not None:
            for changeset in changesets:
                for k, vs in changeset.items():
                    for v in vs:
                        self.appendChangesetData(k, v)
                self.endChangeset()

    def isEmpty(self):
        return (
            self.dn is None
            and self.changetype is None
            and not self.controls
            and not self.attributes
            and not self.changesets
        )

    def isChange(self):
        return self.changetype is not None

    def endChangeset(self):
        """
        Close the current change-set; the next change line starts a
        new one.
        """
        self._changesetOpen = False

    def appendChangesetData(self, key, value):
        if not self._changesetOpen:
            self.changesets.append(InsensitiveDict())
            self._changesetOpen = True
        self.changesets[-1].setdefault(key, []).append(value)

    def addAttributeValue(self, key, value):
        self.attributes.setdefault(key, []).append(value)

    def addControl(self, value):
        self.controls.append(value)

    def getControls(self):
        """
        Return the controls of the record as a list of LDIFControl.
        """
        return [parseControl(c) for c in self.controls]

    def describeControls(self):
        """
        Return a list of (LDIFControl, description) pairs; the
        description is None for controls nobody registered.
        """
        r = []
        for control in self.getControls():
            info = oid.describe(control.controlType)
            r.append((control, info.desc if info is not None else None))
        return r

    def toWire(self):
        return ldif.asLDIF(self)

    def getLDIF(self):
        return self.toWire().decode("utf-8", "surrogateescape")

    def __eq__(self, other):
        if not isinstance(other, LDIFRecord):
            return NotImplemented
        return (
            self.dn == other.dn
            and self.changetype == other.changetype
            and self.controls == other.controls
            and _folded(self.attributes) == _folded(other.attributes)
            and [_folded(c) for c in self.changesets]
            == [_folded(c) for c in other.changesets]
        )

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        if self.isChange():
            data = "changetype=%r, changesets=%r" % (
                self.changetype,
                [dict(c.items()) for c in self.changesets],
            )
        else:
            data = "attributes=%r" % (dict(self.attributes.items()),)
        return "{}(dn={!r}, {})".format(self.__class__.__name__, self.dn, data)


class InterchangeFile:
    """
    The parsed content of one LDIF file.

    @ivar changes: whether the records are change records.
    @ivar version: the declared LDIF version, or None.
    """

    def __init__(self, changes, records=(), version=None):
        self.changes = changes
        self.records = tuple(records)
        self.version = version

    def isChangesSet(self):
        return self.changes

    def getEntries(self):
        return list(self.records)

    def recordsByLine(self):
        """
        Return a dict of records keyed by the line their block
        started at, in file order.
        """
        return {record.lineNumber: record for record in self.records}

    def __iter__(self):
        return iter(self.records)

    def __len__(self):
        return len(self.records)

    def toWire(self):
        return ldif.manyAsLDIF(self.records, version=self.version)

    def __eq__(self, other):
        if not isinstance(other, InterchangeFile):
            return NotImplemented
        return (
            self.changes == other.changes
            and self.version == other.version
            and list(self.records) == list(other.records)
        )

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return "{}(changes={!r}, records={!r}, version={!r})".format(
            self.__class__.__name__, self.changes, list(self.records), self.version
        )
