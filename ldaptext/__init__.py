"""Parsing and writing of the text formats used by directory tooling"""
__version__ = "1.0.0"

__title__ = "ldaptext"
__description__ = "LDIF, schema, ACL and generalized time parsing for directory tooling"
__uri__ = "https://github.com/fusiondirectory/ldaptext"

__license__ = "MIT"
__author__ = "The ldaptext developers"
__copyright__ = "Copyright (c) 2020-2026 {}".format(__author__)
