"""
Standard OIDs found in directory text, with description and RFC number.

Mostly useful to give a name to the C{control:} lines of LDIF change
records.
"""

import collections

OIDInfo = collections.namedtuple("OIDInfo", ["desc", "rfc"])

LDAP_CONTROL_MANAGEDSAIT = "2.16.840.1.113730.3.4.2"
LDAP_CONTROL_PROXY_AUTHZ = "2.16.840.1.113730.3.4.18"
LDAP_CONTROL_SUBENTRIES = "1.3.6.1.4.1.4203.1.10.1"
LDAP_CONTROL_VALUESRETURNFILTER = "1.2.826.0.1.3344810.2.3"
LDAP_CONTROL_ASSERT = "1.3.6.1.1.12"
LDAP_CONTROL_PRE_READ = "1.3.6.1.1.13.1"
LDAP_CONTROL_POST_READ = "1.3.6.1.1.13.2"
LDAP_CONTROL_SORTREQUEST = "1.2.840.113556.1.4.473"
LDAP_CONTROL_SORTRESPONSE = "1.2.840.113556.1.4.474"
LDAP_CONTROL_PAGEDRESULTS = "1.2.840.113556.1.4.319"
LDAP_CONTROL_AUTHZID_REQUEST = "2.16.840.1.113730.3.4.16"
LDAP_CONTROL_AUTHZID_RESPONSE = "2.16.840.1.113730.3.4.15"
LDAP_CONTROL_SYNC = "1.3.6.1.4.1.4203.1.9.1.1"
LDAP_CONTROL_SYNC_STATE = "1.3.6.1.4.1.4203.1.9.1.2"
LDAP_CONTROL_SYNC_DONE = "1.3.6.1.4.1.4203.1.9.1.3"
LDAP_CONTROL_DONTUSECOPY = "1.3.6.1.1.22"
LDAP_CONTROL_PASSWORDPOLICY = "1.3.6.1.4.1.42.2.27.8.5.1"
LDAP_CONTROL_X_INCREMENTAL_VALUES = "1.2.840.113556.1.4.802"
LDAP_CONTROL_X_DOMAIN_SCOPE = "1.2.840.113556.1.4.1339"
LDAP_CONTROL_X_PERMISSIVE_MODIFY = "1.2.840.113556.1.4.1413"
LDAP_CONTROL_X_SEARCH_OPTIONS = "1.2.840.113556.1.4.1340"
LDAP_CONTROL_X_TREE_DELETE = "1.2.840.113556.1.4.805"
LDAP_CONTROL_X_EXTENDED_DN = "1.2.840.113556.1.4.529"
LDAP_CONTROL_VLVREQUEST = "2.16.840.1.113730.3.4.9"
LDAP_CONTROL_VLVRESPONSE = "2.16.840.1.113730.3.4.10"

# password policy request and response share one OID
CONTROLS = {
    LDAP_CONTROL_MANAGEDSAIT: OIDInfo("Manage DSA IT", 3296),
    LDAP_CONTROL_PROXY_AUTHZ: OIDInfo("Proxied Authorization", 4370),
    LDAP_CONTROL_SUBENTRIES: OIDInfo("Subentries", 3672),
    LDAP_CONTROL_VALUESRETURNFILTER: OIDInfo("Filter returned values", 3876),
    LDAP_CONTROL_ASSERT: OIDInfo("Assertion", 4528),
    LDAP_CONTROL_PRE_READ: OIDInfo("Pre read", 4527),
    LDAP_CONTROL_POST_READ: OIDInfo("Post read", 4527),
    LDAP_CONTROL_SORTREQUEST: OIDInfo("Sort request", 2891),
    LDAP_CONTROL_SORTRESPONSE: OIDInfo("Sort response", 2891),
    LDAP_CONTROL_PAGEDRESULTS: OIDInfo("Paged results", 2696),
    LDAP_CONTROL_AUTHZID_REQUEST: OIDInfo("Authorization Identity Request", 3829),
    LDAP_CONTROL_AUTHZID_RESPONSE: OIDInfo("Authorization Identity Response", 3829),
    LDAP_CONTROL_SYNC: OIDInfo("Content Synchronization Operation", 4533),
    LDAP_CONTROL_SYNC_STATE: OIDInfo("Content Synchronization Operation State", 4533),
    LDAP_CONTROL_SYNC_DONE: OIDInfo("Content Synchronization Operation Done", 4533),
    LDAP_CONTROL_DONTUSECOPY: OIDInfo("Don't Use Copy", 6171),
    LDAP_CONTROL_PASSWORDPOLICY: OIDInfo("Password Policy", None),
    LDAP_CONTROL_X_INCREMENTAL_VALUES: OIDInfo("Active Directory Incremental Values", None),
    LDAP_CONTROL_X_DOMAIN_SCOPE: OIDInfo("Active Directory Domain Scope", None),
    LDAP_CONTROL_X_PERMISSIVE_MODIFY: OIDInfo("Active Directory Permissive Modify", None),
    LDAP_CONTROL_X_SEARCH_OPTIONS: OIDInfo("Active Directory Search Options", None),
    LDAP_CONTROL_X_TREE_DELETE: OIDInfo("Active Directory Tree Delete", None),
    LDAP_CONTROL_X_EXTENDED_DN: OIDInfo("Active Directory Extended DN", None),
    LDAP_CONTROL_VLVREQUEST: OIDInfo("Virtual List View Request", None),
    LDAP_CONTROL_VLVRESPONSE: OIDInfo("Virtual List View Response", None),
}

LDAP_EXOP_START_TLS = "1.3.6.1.4.1.1466.20037"
LDAP_EXOP_MODIFY_PASSWD = "1.3.6.1.4.1.4203.1.11.1"
LDAP_EXOP_REFRESH = "1.3.6.1.4.1.1466.101.119.1"
LDAP_EXOP_WHO_AM_I = "1.3.6.1.4.1.4203.1.11.3"
LDAP_EXOP_TURN = "1.3.6.1.1.19"
LDAP_EXOP_CANCEL = "1.3.6.1.1.8"

EXOPS = {
    LDAP_EXOP_START_TLS: OIDInfo("Start TLS", 4511),
    LDAP_EXOP_MODIFY_PASSWD: OIDInfo("Modify password", 3062),
    LDAP_EXOP_REFRESH: OIDInfo("Refresh", 2589),
    LDAP_EXOP_WHO_AM_I: OIDInfo("WHOAMI", 4532),
    LDAP_EXOP_TURN: OIDInfo("Turn", 4531),
    LDAP_EXOP_CANCEL: OIDInfo("Cancel operation", 3909),
}

LDAP_FEATURE_MODIFYINCREMENT = "1.3.6.1.1.14"
LDAP_FEATURE_ALLOPERATIONALATTRIBUTES = "1.3.6.1.4.1.4203.1.5.1"
LDAP_FEATURE_RETURNALLATTRIBUTES = "1.3.6.1.4.1.4203.1.5.2"
LDAP_FEATURE_ABSOLUTEFILTERS = "1.3.6.1.4.1.4203.1.5.3"
LDAP_FEATURE_LANGUAGETAG = "1.3.6.1.4.1.4203.1.5.4"
LDAP_FEATURE_RANGEMATCHING = "1.3.6.1.4.1.4203.1.5.5"

FEATURES = {
    LDAP_FEATURE_MODIFYINCREMENT: OIDInfo("Modify-Increment Extension", 4525),
    LDAP_FEATURE_ALLOPERATIONALATTRIBUTES: OIDInfo("All Operational Attributes", 3673),
    LDAP_FEATURE_RETURNALLATTRIBUTES: OIDInfo(
        "Return of All Attributes of an Object Class", 4529
    ),
    LDAP_FEATURE_ABSOLUTEFILTERS: OIDInfo("Absolute True and False Filters", 4526),
    LDAP_FEATURE_LANGUAGETAG: OIDInfo("Language Tag Options", 3866),
    LDAP_FEATURE_RANGEMATCHING: OIDInfo("Language Range Matching of Attributes", 3866),
}


def describe(oid):
    """
    Return the OIDInfo of a known control, extended operation or
    feature, or None.
    """
    for registry in (CONTROLS, EXOPS, FEATURES):
        info = registry.get(oid)
        if info is not None:
            return info
    return None
