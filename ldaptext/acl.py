"""
OpenLDAP access control directives, as found in olcAccess values.

Grammar, from slapd.access(5)::

    <access directive> ::= to <what> [by <who> [<access>] [<control>]]+
    <what> ::= * | [dn[.<basic-style>]=<regex> | dn.<scope-style>=<DN>]
        [filter=<ldapfilter>] [attrs=<attrlist>]
    <basic-style> ::= regex | exact
    <scope-style> ::= base | one | subtree | children
    <attrlist> ::= <attr> [val[.<basic-style>]=<regex>] | <attr> , <attrlist>
    <attr> ::= <attrname> | entry | children
    <who> ::= * | [anonymous | users | self
            | dn[.<basic-style>]=<regex> | dn.<scope-style>=<DN>]
        [dnattr=<attrname>]
        [group[/<objectclass>[/<attrname>][.<basic-style>]]=<regex>]
        [peername[.<basic-style>]=<regex>]
        [sockname[.<basic-style>]=<regex>]
        [domain[.<basic-style>]=<regex>]
        [sockurl[.<basic-style>]=<regex>]
        [set=<setspec>]
        [aci=<attrname>]
    <access> ::= [self]{<level>|<priv>}
    <level> ::= none | disclose | auth | compare | search | read | write | manage
    <priv> ::= {=|+|-}{m|w|r|s|c|x|d|0}+
    <control> ::= [stop | continue | break]

Only the <what> part is interpreted; every "by" clause is kept as the
list of its tokens.
"""

import re

from ldaptext import errors


class AclParseError(errors.ParseError):
    """Could not parse ACL"""


class AclMissingToError(AclParseError, errors.StructuralError):
    """Invalid ACL format: missing "to" keyword"""


class AclInvalidTargetError(AclParseError, errors.StructuralError):
    """Invalid "to" clause in ACL"""


class AclMissingByError(AclParseError, errors.StructuralError):
    """Missing "by" clause in ACL"""


class AclEmptyByClauseError(AclParseError, errors.StructuralError):
    """Empty "by" clause in ACL"""


TARGET_KEYS = (
    "dn",
    "dn.regex",
    "dn.exact",
    "dn.base",
    "dn.one",
    "dn.subtree",
    "dn.children",
    "filter",
    "attrs",
)

WILDCARD = "*"

_indexRe = re.compile(r"^\{(\d+)\}")
# quoted parts may hold spaces, as in dn.subtree="ou=my people,dc=example"
_tokenRe = re.compile(r'(\s*)((?:"[^"]*"|\S)+)')


def _tokenize(text):
    """
    Split text into (separator, token) pairs, where separator is the
    whitespace preceding the token, and return them with the trailing
    whitespace.
    """
    tokens = []
    end = 0
    for m in _tokenRe.finditer(text):
        tokens.append((m.group(1), m.group(2)))
        end = m.end()
    return tokens, text[end:]


def _unquote(value):
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value


class AclDirective:
    """
    One access control directive.

    @ivar index: position of the directive, from its C{{n}} prefix, or
    None.
    @ivar to: C{"*"} or a dict of target selector to its value.
    @ivar by: list of subject clauses, each a tuple of tokens.
    """

    def __init__(self, text):
        self.index = None
        self._indexText = ""
        self.to = None
        self.by = []
        self._targetTokens = []
        self._byTokens = []
        self._trailing = ""
        self._parse(text)

    def _parse(self, text):
        acl = text
        m = _indexRe.match(acl)
        if m is not None:
            self.index = int(m.group(1))
            self._indexText = m.group(0)
            acl = acl[m.end() :]

        tokens, self._trailing = _tokenize(acl)
        if not tokens or tokens[0] != ("", "to"):
            raise AclMissingToError(text)
        i = self._parseTo(text, tokens, 1)

        if i >= len(tokens) or tokens[i][1] != "by":
            raise AclMissingByError(text)
        while i < len(tokens):
            i = self._parseBy(text, tokens, i)

    def _parseTo(self, text, tokens, i):
        if i < len(tokens) and tokens[i][1] == WILDCARD:
            self.to = WILDCARD
            self._targetTokens.append(tokens[i])
            return i + 1

        self.to = {}
        while i < len(tokens) and tokens[i][1] != "by":
            token = tokens[i][1]
            key, sep, value = token.partition("=")
            if not sep or key not in TARGET_KEYS:
                raise AclInvalidTargetError(token, text)
            self.to[key] = _unquote(value)
            self._targetTokens.append(tokens[i])
            i += 1
        if not self.to:
            if i < len(tokens):
                raise AclInvalidTargetError(tokens[i][1], text)
            raise AclMissingByError(text)
        return i

    def _parseBy(self, text, tokens, i):
        """
        Consume one "by" clause starting at the "by" keyword found at
        position i and return the position of the next one.
        """
        keyword = tokens[i]
        i += 1
        clause = []
        while i < len(tokens) and tokens[i][1] != "by":
            clause.append(tokens[i])
            i += 1
        if not clause:
            raise AclEmptyByClauseError(len(self.by) + 1, text)
        self.by.append(tuple(token for _, token in clause))
        self._byTokens.append([keyword] + clause)
        return i

    def getTargetText(self):
        return " ".join(token for _, token in self._targetTokens)

    def getText(self):
        """
        Return the directive as text, spacing included.
        """
        r = []
        r.append(self._indexText)
        r.append("to")
        for tokens in [self._targetTokens] + self._byTokens:
            for sep, token in tokens:
                r.append(sep + token)
        r.append(self._trailing)
        return "".join(r)

    def dump(self, indent=""):
        """
        Return a human readable dump of the directive, one line for
        the target and one per "by" clause, each prefixed with indent.
        """
        prefix = ""
        if self.index is not None:
            prefix = "%d: " % self.index
        lines = [indent + prefix + "to " + self.getTargetText()]
        for clause in self.by:
            lines.append(indent + "   by " + " ".join(clause))
        return "\n".join(lines) + "\n"

    def __eq__(self, other):
        if not isinstance(other, AclDirective):
            return NotImplemented
        return (
            self.index == other.index
            and self.to == other.to
            and self.by == other.by
        )

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return "{}({!r})".format(self.__class__.__name__, self.getText())


def parseAcls(values):
    """
    Parse a list of directives, typically the olcAccess values of a
    database, and return them ordered by index.  Directives without
    index keep their place after the indexed ones.
    """
    acls = [AclDirective(value) for value in values]
    return sorted(acls, key=lambda acl: (acl.index is None, acl.index or 0))
