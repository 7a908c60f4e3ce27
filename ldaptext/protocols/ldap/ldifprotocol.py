"""
Reading of LDIF (RFC 2849) data, both entry files and change files.

The parser is a line receiver so that it can sit behind any transport;
fromLDIFString and fromLDIFFile drive it for in-memory and file data.
"""

import base64
import binascii

from twisted.internet import protocol
from twisted.protocols import basic
from twisted.python import log

from ldaptext import entry, errors
from ldaptext._encoder import to_bytes, to_unicode


class LDIFParseError(errors.ParseError):
    """Error parsing LDIF"""


class LDIFLineWithoutColonError(LDIFParseError, errors.StructuralError):
    """LDIF line without colon seen"""


class LDIFEntryStartsWithNonDNError(LDIFParseError, errors.StructuralError):
    """LDIF entry starts with a non-DN line"""


class LDIFEntryStartsWithSpaceError(LDIFParseError, errors.StructuralError):
    """LDIF entry starts with a continuation line"""


class LDIFEntryHasMultipleDNError(LDIFParseError, errors.StructuralError):
    """LDIF entry can only have one DN"""


class LDIFVersionNotANumberError(LDIFParseError, errors.StructuralError):
    """Non-numeric LDIF version number"""


class LDIFUnsupportedVersionError(LDIFParseError, errors.StructuralError):
    """LDIF version not supported"""


class LDIFMixedChangesError(LDIFParseError, errors.StructuralError):
    """All LDIF entries must set changetype, or none of them should"""


class LDIFChangetypeAfterDataError(LDIFParseError, errors.StructuralError):
    """LDIF changetype must come before any data of the entry"""


class LDIFUnknownChangetypeError(LDIFParseError, errors.StructuralError):
    """Unknown LDIF changetype"""


class LDIFChangesetSeparatorError(LDIFParseError, errors.StructuralError):
    """LDIF change-set separator outside of a change entry"""


class LDIFEmptyValueError(LDIFParseError, errors.StructuralError):
    """LDIF attribute has no value"""


class LDIFLineTooLongError(LDIFParseError, errors.StructuralError):
    """LDIF line too long"""


class LDIFInvalidBase64Error(LDIFParseError, errors.EncodingError):
    """Invalid base64 data in LDIF"""


class LDIFExternalReferenceError(LDIFParseError, errors.SemanticError):
    """References to an external file are not supported"""


class LDIFParserState:
    """
    Everything one parse accumulates.

    @ivar line: the logical line being unfolded, as bytes, or None.
    @ivar lineNumber: physical line at which C{line} started.
    @ivar entry: the record being filled.
    @ivar entries: completed records, in file order.
    @ivar version: declared LDIF version, or None.
    @ivar changes: None until the first entry or changetype decides
    whether this is a change file, then True or False.
    """

    def __init__(self):
        self.line = None
        self.lineNumber = None
        self.entry = entry.LDIFRecord()
        self.entries = []
        self.version = None
        self.changes = None


class LDIF(basic.LineReceiver):
    delimiter = b"\n"
    MAX_LENGTH = 1 << 24

    done = False

    def __init__(self):
        self.state = LDIFParserState()
        self.physicalLines = 0

    def lineReceived(self, line):
        self.physicalLines += 1
        if line.endswith(b"\r"):
            line = line[:-1]
        state = self.state

        if line.startswith(b" "):
            if state.line is None:
                raise LDIFEntryStartsWithSpaceError(lineNumber=self.physicalLines)
            state.line = state.line + line[1:]
            return

        if state.line is not None:
            self.logicalLineReceived(to_unicode(state.line), state.lineNumber)

        line = line.lstrip()
        if line == b"":
            state.line = None
            self._endEntry()
        else:
            state.line = line
            state.lineNumber = self.physicalLines

    def lineLengthExceeded(self, line):
        raise LDIFLineTooLongError(len(line), lineNumber=self.physicalLines + 1)

    def logicalLineReceived(self, line, lineNumber):
        if line.startswith("#"):
            # comments are allowed everywhere
            return

        record = self.state.entry
        if line == "-":
            if record.isEmpty():
                raise LDIFEntryStartsWithNonDNError(line, lineNumber=lineNumber)
            if not record.isChange():
                raise LDIFChangesetSeparatorError(record.dn, lineNumber=lineNumber)
            record.endChangeset()
            return

        key, val = self._parseLine(line, lineNumber)
        self._dispatch(key, val, lineNumber)

    def parseValue(self, key, val, lineNumber):
        val = val.lstrip()
        if val.startswith(":"):
            try:
                val = base64.b64decode(val[1:].strip(), validate=True)
            except (binascii.Error, ValueError) as e:
                raise LDIFInvalidBase64Error(key, lineNumber=lineNumber) from e
            val = to_unicode(val)
        elif val.startswith("<"):
            # checked before decoding, a base64 value may start with <
            raise LDIFExternalReferenceError(key, lineNumber=lineNumber)
        if val == "":
            raise LDIFEmptyValueError(key, lineNumber=lineNumber)
        return val

    def _parseLine(self, line, lineNumber):
        try:
            key, val = line.split(":", 1)
        except ValueError:
            # unpack list of wrong size
            # -> invalid input data
            raise LDIFLineWithoutColonError(line, lineNumber=lineNumber)
        val = self.parseValue(key, val, lineNumber)
        return key, val

    def _dispatch(self, key, val, lineNumber):
        state = self.state
        record = state.entry
        keyword = key.lower()

        if (
            keyword == "version"
            and record.isEmpty()
            and not state.entries
            and state.version is None
        ):
            try:
                version = int(val)
            except ValueError:
                raise LDIFVersionNotANumberError(val, lineNumber=lineNumber)
            if version != 1:
                raise LDIFUnsupportedVersionError(version, lineNumber=lineNumber)
            state.version = version
        elif keyword == "dn":
            if not record.isEmpty():
                raise LDIFEntryHasMultipleDNError(val, lineNumber=lineNumber)
            record.dn = val
            record.lineNumber = lineNumber
        elif record.isEmpty():
            raise LDIFEntryStartsWithNonDNError(key, lineNumber=lineNumber)
        elif keyword == "changetype":
            if state.changes is False:
                raise LDIFMixedChangesError(record.dn, lineNumber=lineNumber)
            if record.isChange() or record.attributes:
                raise LDIFChangetypeAfterDataError(record.dn, lineNumber=lineNumber)
            if val not in entry.CHANGETYPES:
                raise LDIFUnknownChangetypeError(val, lineNumber=lineNumber)
            state.changes = True
            record.changetype = val
        elif keyword == "control":
            record.addControl(val)
        elif state.changes:
            if not record.isChange():
                raise LDIFMixedChangesError(record.dn, lineNumber=lineNumber)
            record.appendChangesetData(key, val)
        else:
            record.addAttributeValue(key, val)

    def _endEntry(self):
        state = self.state
        record = state.entry
        if not record.isEmpty():
            if not record.isChange():
                if state.changes:
                    raise LDIFMixedChangesError(
                        record.dn, lineNumber=record.lineNumber
                    )
                state.changes = False
            state.entries.append(record)
            log.msg(
                "LDIF entry %r from line %d" % (record.dn, record.lineNumber),
                debug=True,
            )
            self.gotEntry(record)
        state.entry = entry.LDIFRecord()

    def gotEntry(self, obj):
        pass

    def connectionLost(self, reason=protocol.connectionDone):
        # a last line without line break is still a line
        if self._buffer:
            line, self._buffer = self._buffer, b""
            self.lineReceived(line)
        state = self.state
        if state.line is not None:
            self.logicalLineReceived(to_unicode(state.line), state.lineNumber)
            state.line = None
        self._endEntry()
        self.done = True

    def getResult(self):
        """
        Return the InterchangeFile of everything parsed so far.
        """
        state = self.state
        return entry.InterchangeFile(
            changes=bool(state.changes),
            records=state.entries,
            version=state.version,
        )


def fromLDIFString(data):
    """Parse LDIF data held in memory, as text or bytes."""
    p = LDIF()
    for line in to_bytes(data).split(b"\n"):
        p.lineReceived(line)
    p.connectionLost()
    result = p.getResult()
    log.msg(
        "Parsed %d LDIF %s"
        % (len(result), "changes" if result.changes else "entries"),
        debug=True,
    )
    return result


def fromLDIFFile(f):
    """Read LDIF data from a file opened in text or binary mode."""
    p = LDIF()
    for line in f:
        line = to_bytes(line)
        if line.endswith(b"\n"):
            line = line[:-1]
        p.lineReceived(line)
    p.connectionLost()
    result = p.getResult()
    log.msg(
        "Read %d LDIF %s from %s"
        % (
            len(result),
            "changes" if result.changes else "entries",
            getattr(f, "name", repr(f)),
        )
    )
    return result
