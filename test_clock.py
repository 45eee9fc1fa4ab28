import datetime
import json
import unittest
from unittest.mock import patch

from mcpclock import clock
from mcpclock.config import ALPHADEC_PREAMBLE, MAX_TIMEZONES
from mcpclock.domain import AlphadecEntry, UtcEntry, ZoneEntry
from mcpclock.timeutil import parse_iso_utc, to_iso_z, unix_ms

UTC = datetime.timezone.utc
BASE = datetime.datetime(2025, 6, 9, 16, 30, tzinfo=UTC)


def report(*args, **kwargs):
    kwargs.setdefault("base", BASE)
    return clock.clock_report(*args, **kwargs)


class TestClockReport(unittest.TestCase):
    def test_default_is_utc_and_alphadec(self):
        entries = json.loads(report())

        self.assertEqual(
            entries,
            [
                {
                    "timezone": "UTC",
                    "iso": "2025-06-09T16:30:00.000Z",
                    "unixtime": 1749486600,
                },
                {
                    "timezone": "Alphadec",
                    "alphadec": "2025_L3T5_000000",
                    "readable": "L3:T5",
                },
            ],
        )

    def test_iana_zones(self):
        entries = json.loads(report(["Asia/Tokyo", "America/New_York"]))

        self.assertEqual(
            entries[0],
            {
                "timezone": "Asia/Tokyo",
                "time12": "1:30 AM",
                "time24": "01:30",
                "dayName": "Tuesday",
                "date": "Jun 10, 2025",
            },
        )
        self.assertEqual(entries[1]["timezone"], "America/New_York")
        self.assertEqual(entries[1]["time12"], "12:30 PM")
        self.assertEqual(entries[1]["dayName"], "Monday")
        self.assertEqual(entries[1]["date"], "Jun 9, 2025")
        # UTC is appended when not requested, Alphadec is always last
        self.assertEqual([e["timezone"] for e in entries[2:]], ["UTC", "Alphadec"])

    def test_utc_kept_in_request_order_once(self):
        entries = json.loads(report(["UTC", "Europe/Paris", "UTC"]))
        self.assertEqual(
            [e["timezone"] for e in entries], ["UTC", "Europe/Paris", "Alphadec"]
        )

    def test_offset_seconds(self):
        entries = json.loads(report(offset_seconds=-86400))
        self.assertEqual(entries[0]["iso"], "2025-06-08T16:30:00.000Z")
        self.assertEqual(entries[0]["unixtime"], 1749486600 - 86400)

    def test_explicit_alphadec_adds_preamble(self):
        text = report(["Alphadec"])

        preamble, body = text.split("\n", 1)
        self.assertEqual(preamble, ALPHADEC_PREAMBLE)
        entries = json.loads(body)
        self.assertEqual(entries[-1]["readable"], "L3:T5")

    def test_canonical_only(self):
        text = report(["Alphadec"], canonical_only=True)

        entries = json.loads(text)
        self.assertEqual(
            entries[-1], {"timezone": "Alphadec", "alphadec": "2025_L3T5_000000"}
        )

    def test_canonical_only_needs_explicit_alphadec(self):
        entries = json.loads(report(["UTC"], canonical_only=True))
        self.assertIn("readable", entries[-1])

    def test_invalid_timezone(self):
        with self.assertRaises(ValueError) as ctx:
            report(["Mars/Olympus_Mons"])
        self.assertEqual(str(ctx.exception), "Invalid timezone: Mars/Olympus_Mons")

    def test_offset_outside_date_range(self):
        with self.assertRaises(ValueError) as ctx:
            report(offset_seconds=999999999999)
        self.assertIn("offset_seconds out of range", str(ctx.exception))

    def test_zone_conversion_outside_date_range(self):
        last_hour = datetime.datetime(9999, 12, 31, 23, tzinfo=UTC)
        with self.assertRaises(ValueError):
            clock.clock_report(["Asia/Tokyo"], base=last_hour)

    def test_too_many_timezones(self):
        with self.assertRaises(ValueError):
            report(["UTC"] * (MAX_TIMEZONES + 1))

    def test_empty_list_defaults_to_utc(self):
        entries = json.loads(report([]))
        self.assertEqual([e["timezone"] for e in entries], ["UTC", "Alphadec"])

    @patch("mcpclock.clock.now_utc")
    def test_uses_current_time_by_default(self, mock_now):
        mock_now.return_value = BASE
        entries = json.loads(clock.clock_report())
        self.assertEqual(entries[-1]["alphadec"], "2025_L3T5_000000")


class TestEntries(unittest.TestCase):
    def test_zone_entry_midnight_and_noon(self):
        midnight = ZoneEntry.from_local("UTC", datetime.datetime(2025, 1, 6, 0, 5))
        noon = ZoneEntry.from_local("UTC", datetime.datetime(2025, 1, 6, 12, 0))

        self.assertEqual(midnight.time12, "12:05 AM")
        self.assertEqual(midnight.time24, "00:05")
        self.assertEqual(noon.time12, "12:00 PM")

    def test_utc_entry(self):
        entry = UtcEntry.from_datetime(datetime.datetime(2025, 1, 1, 0, 0, 0, 999999, tzinfo=UTC))
        self.assertEqual(entry.iso, "2025-01-01T00:00:00.999Z")
        self.assertEqual(entry.unixtime, 1735689600)

    def test_alphadec_entry_without_readable(self):
        entry = AlphadecEntry(alphadec="2025_A0A0_000000")
        self.assertNotIn("readable", entry.to_dict())


class TestTimeUtil(unittest.TestCase):
    def test_parse_z_and_offset(self):
        self.assertEqual(parse_iso_utc("2025-06-09T16:30:00Z"), BASE)
        self.assertEqual(parse_iso_utc("2025-06-09T16:30:00.000Z"), BASE)
        self.assertEqual(parse_iso_utc("2025-06-09T12:30:00-04:00"), BASE)

    def test_parse_rejects_out_of_range_offset(self):
        with self.assertRaises(ValueError) as ctx:
            parse_iso_utc("9999-12-31T23:59:59-05:00")
        self.assertIn("outside the supported date range", str(ctx.exception))

    def test_parse_rejects_naive_and_garbage(self):
        for bad in ("2025-06-09T16:30:00", "yesterday", "", None):
            with self.assertRaises(ValueError):
                parse_iso_utc(bad)

    def test_to_iso_z(self):
        self.assertEqual(to_iso_z(BASE), "2025-06-09T16:30:00.000Z")
        tokyo = datetime.timezone(datetime.timedelta(hours=9))
        self.assertEqual(
            to_iso_z(datetime.datetime(2025, 6, 10, 1, 30, 0, 123456, tzinfo=tokyo)),
            "2025-06-09T16:30:00.123Z",
        )

    def test_unix_ms(self):
        self.assertEqual(unix_ms(BASE), 1749486600000)


if __name__ == "__main__":
    unittest.main()
