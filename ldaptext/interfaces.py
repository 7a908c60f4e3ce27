from zope.interface import Interface, Attribute


class IDirectoryTransport(Interface):
    """
    Something that talks to a directory server on our behalf.

    Only attribute mappings (attribute name to list of values) and DN
    strings cross this boundary; connection handling, binding and
    result codes are the business of the implementation.
    """

    def addEntry(dn, attributes):
        """
        Create the entry C{dn} with C{attributes}.
        """

    def replaceAttributes(dn, attributes):
        """
        Replace the values of every attribute listed in C{attributes}
        on the existing entry C{dn}.  An empty list removes the
        attribute.
        """

    def deleteEntry(dn):
        """
        Remove the entry C{dn}.
        """

    def search(base, filterText, attributes=(), scope="subtree"):
        """
        Search the directory.

        @param scope: one of C{"base"}, C{"one"} or C{"subtree"}.

        @return: a mapping of DN to attribute mapping, empty when
        nothing matched.
        """


class IWireRepresentable(Interface):
    """
    An object that has a canonical text encoding.
    """

    def toWire():
        """
        Return the encoding as bytes.
        """


class ILDIFRecord(IWireRepresentable):
    """
    One block of an LDIF file.
    """

    dn = Attribute("Distinguished name of the entry, as text.")
    changetype = Attribute("The change type, or None for plain records.")
    controls = Attribute("List of raw control specifications.")
    lineNumber = Attribute("Line at which the block started, or None.")

    def isEmpty():
        """
        Whether nothing has been stored in the record yet.
        """

    def isChange():
        """
        Whether this record describes a change rather than an entry.
        """
