"""
Conversion between LDAP GeneralizedTime strings and datetime objects.

RFC4517 section 3.3.13::

        GeneralizedTime = century year month day hour
                             [ minute [ second / leap-second ] ]
                             [ fraction ]
                             g-time-zone

        century = 2(%x30-39) ; "00" to "99"
        year    = 2(%x30-39) ; "00" to "99"
        month   =   ( %x30 %x31-39 ) ; "01" (January) to "09"
                  / ( %x31 %x30-32 ) ; "10" to "12"
        day     =   ( %x30 %x31-39 )    ; "01" to "09"
                  / ( %x31-32 %x30-39 ) ; "10" to "29"
                  / ( %x33 %x30-31 )    ; "30" to "31"
        hour    = ( %x30-31 %x30-39 ) / ( %x32 %x30-33 ) ; "00" to "23"
        minute  = %x30-35 %x30-39                        ; "00" to "59"

        second      = ( %x30-35 %x30-39 ) ; "00" to "59"
        leap-second = ( %x36 %x30 )       ; "60"

        fraction        = ( DOT / COMMA ) 1*(%x30-39)
        g-time-zone     = %x5A  ; "Z"
                          / g-differential
        g-differential  = ( MINUS / PLUS ) hour [ minute ]

Only fractions of seconds are supported, a fraction following the hour
or the minute is read as a fraction of seconds.  Fractions are kept to
the microsecond.
"""

import datetime

from pyparsing import (
    Optional,
    ParseException,
    Regex,
    StringEnd,
    StringStart,
    Suppress,
)

from ldaptext import errors


class InvalidGeneralizedTime(errors.EncodingError):
    """Invalid LDAP GeneralizedTime"""


year = Regex(r"[0-9]{4}")("year")
year.set_name("year")
month = Regex(r"0[1-9]|1[0-2]")("month")
month.set_name("month")
day = Regex(r"0[1-9]|[12][0-9]|3[01]")("day")
day.set_name("day")
hour = Regex(r"[01][0-9]|2[0-3]")("hour")
hour.set_name("hour")
minute = Regex(r"[0-5][0-9]")("minute")
minute.set_name("minute")
second = Regex(r"[0-5][0-9]|60")("second")
second.set_name("second")
fraction = Suppress(Regex(r"[.,]")) + Regex(r"[0-9]+")("fraction")
fraction.set_name("fraction")
timezone = Regex(r"Z|[-+](?:[01][0-9]|2[0-3])(?:[0-5][0-9])?")("timezone")
timezone.set_name("g-time-zone")

generalizedTime = (
    StringStart()
    + year
    + month
    + day
    + hour
    + Optional(minute + Optional(second))
    + Optional(fraction)
    + timezone
    + StringEnd()
)
generalizedTime.set_name("GeneralizedTime")
generalizedTime.leave_whitespace()


def _tzinfo(text):
    if text == "Z":
        return datetime.timezone.utc
    offset = datetime.timedelta(hours=int(text[1:3]), minutes=int(text[3:5] or 0))
    if text[0] == "-":
        offset = -offset
    return datetime.timezone(offset)


def parseGeneralizedTime(text):
    """
    Convert a GeneralizedTime string to an aware datetime in UTC.

    The date is built by adding the day and the seconds to the first
    day of the month, so a leap second rolls over to the next minute
    (01:59:60 becomes 02:00:00) and a day past the end of the month
    rolls over to the next month, like most date libraries do.
    """
    try:
        m = generalizedTime.parse_string(text)
    except ParseException as e:
        raise InvalidGeneralizedTime(
            "%r does not match LDAP GeneralizedTime format" % (text,)
        ) from e

    microseconds = int(m.get("fraction", "0")[:6].ljust(6, "0"))
    try:
        date = datetime.datetime(
            int(m["year"]),
            int(m["month"]),
            1,
            int(m["hour"]),
            int(m.get("minute", "00")),
            tzinfo=_tzinfo(m["timezone"]),
        )
        date += datetime.timedelta(
            days=int(m["day"]) - 1,
            seconds=int(m.get("second", "00")),
            microseconds=microseconds,
        )
        return date.astimezone(datetime.timezone.utc)
    except (ValueError, OverflowError) as e:
        raise InvalidGeneralizedTime(
            "cannot represent %r: %s" % (text, e)
        ) from e


def _formatOffset(offset):
    sign = "+"
    if offset < datetime.timedelta(0):
        sign = "-"
        offset = -offset
    minutes = offset // datetime.timedelta(minutes=1)
    return "%s%02d%02d" % (sign, minutes // 60, minutes % 60)


def toGeneralizedTime(date, toUTC=True):
    """
    Convert a datetime to a GeneralizedTime string.

    Naive datetimes are taken to be in UTC.  Zero seconds, or zero
    minutes and seconds, are left out.  With toUTC false the date keeps
    its own offset, which is written as C{+HHMM} instead of C{Z} when
    not zero; such values are not in the C{Z}-only UTC form that LDAP
    servers expect, but local time is never labelled C{Z}.
    """
    if date.tzinfo is None:
        date = date.replace(tzinfo=datetime.timezone.utc)
    elif toUTC:
        date = date.astimezone(datetime.timezone.utc)

    # strftime does not zero pad years before 1000 everywhere
    s = "%04d%02d%02d%02d%02d%02d" % (
        date.year,
        date.month,
        date.day,
        date.hour,
        date.minute,
        date.second,
    )
    if date.microsecond:
        s = s + "." + ("%06d" % date.microsecond).rstrip("0")
    elif s.endswith("0000"):
        s = s[:-4]
    elif s.endswith("00"):
        s = s[:-2]

    offset = date.utcoffset()
    if not offset:
        return s + "Z"
    return s + _formatOffset(offset)
