import asyncio
import datetime
import json
import unittest
from unittest.mock import patch

from mcpclock import server

UTC = datetime.timezone.utc
BASE = datetime.datetime(2025, 6, 9, 16, 30, tzinfo=UTC)


class TestToolRegistration(unittest.TestCase):
    def test_tools_listed(self):
        tools = asyncio.run(server.app.list_tools())
        names = {tool.name for tool in tools}
        self.assertEqual(
            names, {"clock_get", "alphadec_encode", "alphadec_decode", "alphadec_units"}
        )

    def test_clock_get_schema(self):
        tools = {tool.name: tool for tool in asyncio.run(server.app.list_tools())}
        properties = tools["clock_get"].inputSchema["properties"]
        self.assertIn("timezones", properties)
        self.assertIn("offset_seconds", properties)
        self.assertIn("adec_canonical_only", properties)


class TestClockGet(unittest.TestCase):
    @patch("mcpclock.clock.now_utc")
    def test_returns_json_entries(self, mock_now):
        mock_now.return_value = BASE
        entries = json.loads(server.clock_get(timezones=["Asia/Kolkata"]))

        self.assertEqual(entries[0]["timezone"], "Asia/Kolkata")
        self.assertEqual(entries[0]["time24"], "22:00")
        self.assertEqual(entries[-1]["alphadec"], "2025_L3T5_000000")

    def test_invalid_timezone_raises(self):
        with self.assertRaises(ValueError):
            server.clock_get(timezones=["Not/AZone"])


class TestAlphadecTools(unittest.TestCase):
    def test_encode(self):
        result = server.alphadec_encode("2025-06-09T16:30:00Z")

        self.assertEqual(result["canonical"], "2025_L3T5_000000")
        self.assertEqual(result["readable"], "L3:T5")
        self.assertEqual(result["iso"], "2025-06-09T16:30:00.000Z")
        self.assertEqual(result["msOffsetInBeat"], 0)

    @patch("mcpclock.server.now_utc")
    def test_encode_defaults_to_now(self, mock_now):
        mock_now.return_value = datetime.datetime(2025, 1, 1, tzinfo=UTC)
        self.assertEqual(server.alphadec_encode()["canonical"], "2025_A0A0_000000")

    def test_encode_rejects_naive(self):
        with self.assertRaises(ValueError):
            server.alphadec_encode("2025-06-09T16:30:00")

    def test_decode(self):
        result = server.alphadec_decode("2025_L3T5_000000")

        self.assertEqual(result["iso"], "2025-06-09T16:30:00.000Z")
        self.assertEqual(result["unixtime_ms"], 1749486600000)
        self.assertEqual(result["periodLetter"], "L")
        self.assertEqual(result["beat"], 5)

    def test_decode_rejects_malformed(self):
        with self.assertRaises(ValueError) as ctx:
            server.alphadec_decode("not-a-timestamp")
        self.assertIn("not-a-timestamp", str(ctx.exception))

    def test_units(self):
        leap = server.alphadec_units(2024)
        common = server.alphadec_units(2025)

        self.assertTrue(leap["is_leap_year"])
        self.assertEqual(leap["days_in_year"], 366)
        self.assertEqual(leap["exact_alignment_points"], 400)
        self.assertEqual(leap["exact_alignment_spacing_ms"], 79_056_000)
        self.assertEqual(common["exact_alignment_spacing_ms"], 78_840_000)
        self.assertGreater(leap["beat_ms"], common["beat_ms"])

    def test_units_rejects_bad_year(self):
        with self.assertRaises(ValueError):
            server.alphadec_units(0)


if __name__ == "__main__":
    unittest.main()
