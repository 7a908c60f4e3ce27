"""
Test cases for ldaptext.generalizedtime
"""

import datetime

from twisted.trial import unittest

from ldaptext import errors
from ldaptext.generalizedtime import (
    InvalidGeneralizedTime,
    parseGeneralizedTime,
    toGeneralizedTime,
)

UTC = datetime.timezone.utc


class TestParseGeneralizedTime(unittest.TestCase):
    def testFull(self):
        self.assertEqual(
            parseGeneralizedTime("19500101000000Z"),
            datetime.datetime(1950, 1, 1, 0, 0, 0, tzinfo=UTC),
        )

    def testFraction(self):
        d = parseGeneralizedTime("20230615123045.5Z")
        self.assertEqual(d, datetime.datetime(2023, 6, 15, 12, 30, 45, 500000, tzinfo=UTC))
        self.assertEqual(d.microsecond, 500000)

    def testCommaFraction(self):
        self.assertEqual(
            parseGeneralizedTime("20230615123045,25Z"),
            datetime.datetime(2023, 6, 15, 12, 30, 45, 250000, tzinfo=UTC),
        )

    def testFractionTruncatedToMicroseconds(self):
        self.assertEqual(parseGeneralizedTime("20230615123045.12345678Z").microsecond, 123456)

    def testResultIsUTC(self):
        d = parseGeneralizedTime("20230615123045Z")
        self.assertEqual(d.utcoffset(), datetime.timedelta(0))

    def testHourOnly(self):
        self.assertEqual(
            parseGeneralizedTime("2023061512Z"),
            datetime.datetime(2023, 6, 15, 12, 0, 0, tzinfo=UTC),
        )

    def testMinutes(self):
        self.assertEqual(
            parseGeneralizedTime("202306151230Z"),
            datetime.datetime(2023, 6, 15, 12, 30, 0, tzinfo=UTC),
        )

    def testPositiveOffset(self):
        self.assertEqual(
            parseGeneralizedTime("20230615123045+0200"),
            datetime.datetime(2023, 6, 15, 10, 30, 45, tzinfo=UTC),
        )

    def testNegativeHourOffset(self):
        self.assertEqual(
            parseGeneralizedTime("20231231230000-05"),
            datetime.datetime(2024, 1, 1, 4, 0, 0, tzinfo=UTC),
        )

    def testLeapSecond(self):
        """
        A leap second is carried over into the next minute.
        """
        self.assertEqual(
            parseGeneralizedTime("20161231235960Z"),
            datetime.datetime(2017, 1, 1, 0, 0, 0, tzinfo=UTC),
        )

    def testDayOverflow(self):
        """
        Days past the end of the month continue into the next one.
        """
        self.assertEqual(
            parseGeneralizedTime("20230231000000Z"),
            datetime.datetime(2023, 3, 3, 0, 0, 0, tzinfo=UTC),
        )

    def testBadInput(self):
        e = self.assertRaises(InvalidGeneralizedTime, parseGeneralizedTime, "bad-input")
        self.assertIsInstance(e, errors.EncodingError)
        self.assertIn("bad-input", str(e))

    def testMissingTimezone(self):
        self.assertRaises(InvalidGeneralizedTime, parseGeneralizedTime, "20230615123045")

    def testInvalidMonth(self):
        self.assertRaises(InvalidGeneralizedTime, parseGeneralizedTime, "20231315123045Z")

    def testInvalidHour(self):
        self.assertRaises(InvalidGeneralizedTime, parseGeneralizedTime, "20230615243045Z")

    def testTrailingGarbage(self):
        self.assertRaises(InvalidGeneralizedTime, parseGeneralizedTime, "20230615123045Zjunk")

    def testLeadingSpace(self):
        self.assertRaises(InvalidGeneralizedTime, parseGeneralizedTime, " 20230615123045Z")

    def testYearZero(self):
        e = self.assertRaises(InvalidGeneralizedTime, parseGeneralizedTime, "00000101000000Z")
        self.assertIn("00000101000000Z", str(e))


class TestToGeneralizedTime(unittest.TestCase):
    def testFraction(self):
        self.assertEqual(
            toGeneralizedTime(datetime.datetime(2023, 6, 15, 12, 30, 45, 500000, tzinfo=UTC)),
            "20230615123045.5Z",
        )

    def testFullSeconds(self):
        self.assertEqual(
            toGeneralizedTime(datetime.datetime(2023, 6, 15, 12, 30, 45, tzinfo=UTC)),
            "20230615123045Z",
        )

    def testZeroSecondsLeftOut(self):
        self.assertEqual(
            toGeneralizedTime(datetime.datetime(2023, 6, 15, 12, 30, tzinfo=UTC)),
            "202306151230Z",
        )

    def testZeroMinutesLeftOut(self):
        self.assertEqual(
            toGeneralizedTime(datetime.datetime(2023, 6, 15, 12, tzinfo=UTC)),
            "2023061512Z",
        )

    def testNaiveIsUTC(self):
        self.assertEqual(
            toGeneralizedTime(datetime.datetime(2023, 6, 15, 12, 30, 45)),
            "20230615123045Z",
        )

    def testConvertedToUTC(self):
        tz = datetime.timezone(datetime.timedelta(hours=2))
        self.assertEqual(
            toGeneralizedTime(datetime.datetime(2023, 6, 15, 12, 30, 45, tzinfo=tz)),
            "20230615103045Z",
        )

    def testKeepOffset(self):
        tz = datetime.timezone(-datetime.timedelta(hours=5, minutes=30))
        self.assertEqual(
            toGeneralizedTime(
                datetime.datetime(2023, 6, 15, 12, 30, 45, tzinfo=tz), toUTC=False
            ),
            "20230615123045-0530",
        )

    def testKeepZeroOffset(self):
        self.assertEqual(
            toGeneralizedTime(
                datetime.datetime(2023, 6, 15, 12, 30, 45, tzinfo=UTC), toUTC=False
            ),
            "20230615123045Z",
        )

    def testSmallYear(self):
        self.assertEqual(
            toGeneralizedTime(datetime.datetime(999, 1, 2, 3, 4, 5, tzinfo=UTC)),
            "09990102030405Z",
        )

    def testRoundTrip(self):
        for text in (
            "20230615123045.5Z",
            "20230615123045.000001Z",
            "2023061512Z",
        ):
            self.assertEqual(toGeneralizedTime(parseGeneralizedTime(text)), text)

    def testZeroMinutesShortened(self):
        self.assertEqual(
            toGeneralizedTime(parseGeneralizedTime("19500101000000Z")), "1950010100Z"
        )
