#!/usr/bin/python

import codecs
import os
import re

from setuptools import find_packages, setup


here = os.path.abspath(os.path.dirname(__file__))


def read(*parts):
    with codecs.open(os.path.join(here, *parts), "r") as f:
        return f.read()


def find_version(*file_paths):
    version_file = read(*file_paths)
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", version_file, re.M)
    if version_match:
        return version_match.group(1)
    raise RuntimeError("Unable to find version string.")


if __name__ == "__main__":
    setup(
        name="ldaptext",
        version=find_version("ldaptext", "__init__.py"),
        description="LDIF, schema, ACL and generalized time parsing for directory tooling",
        long_description="""
ldaptext reads and writes the text formats used to manage OpenLDAP
directories:

- LDIF entry and change files, as a Twisted line receiver.

- schema definitions, from schema files or cn=config LDIF.

- olcAccess access control directives.

- LDAP GeneralizedTime values.
""".strip(),
        license="MIT",
        packages=find_packages(include=["ldaptext", "ldaptext.*"]),
        python_requires=">=3.8",
        install_requires=[
            "Twisted",
            "zope.interface",
            "pyparsing>=3",
        ],
        classifiers=[
            "Development Status :: 5 - Production/Stable",
            "Framework :: Twisted",
            "Intended Audience :: Developers",
            "Intended Audience :: System Administrators",
            "License :: OSI Approved :: MIT License",
            "Operating System :: OS Independent",
            "Programming Language :: Python :: 3",
            "Topic :: System :: Systems Administration :: Authentication/Directory :: LDAP",
        ],
    )
