"""Tests for date range inference and window conversion."""

from datetime import date, datetime

import pytest

from fakes import FakeLLM
from slackq.dates import (
    DATE_EXTRACTION_PROMPT,
    DateRange,
    convert_to_unix_timestamps,
    default_date_range,
    extract_date_strings,
    get_today_date_string,
)

TODAY = "06/15/2024"
FALLBACK = DateRange(start_date="05/16/2024", end_date="06/15/2024")


class TestTodayDateString:
    def test_zero_padded(self):
        assert get_today_date_string(date(2024, 1, 5)) == "01/05/2024"

    def test_defaults_to_today(self):
        assert get_today_date_string() == date.today().strftime("%m/%d/%Y")


class TestDefaultDateRange:
    def test_thirty_days_back(self):
        assert default_date_range(TODAY) == FALLBACK

    def test_crosses_year_boundary(self):
        result = default_date_range("01/10/2025")
        assert result == DateRange(start_date="12/11/2024", end_date="01/10/2025")


class TestExtractDateStrings:
    @pytest.mark.asyncio
    async def test_valid_response(self):
        llm = FakeLLM(default='{"startDate": "06/08/2024", "endDate": "06/15/2024"}')

        result = await extract_date_strings(llm, "Find messages from last week", TODAY)

        assert result == DateRange(start_date="06/08/2024", end_date="06/15/2024")

    @pytest.mark.asyncio
    async def test_prompt_includes_today_and_instructions(self):
        llm = FakeLLM(default='{"startDate": "06/08/2024", "endDate": "06/15/2024"}')

        await extract_date_strings(llm, "Find launch notes", TODAY)

        call = llm.calls[0]
        assert call["system"] == DATE_EXTRACTION_PROMPT
        assert "Today's date: 06/15/2024" in call["prompt"]
        assert '"Find launch notes"' in call["prompt"]

    @pytest.mark.asyncio
    async def test_code_fenced_response(self):
        llm = FakeLLM(default='```json\n{"startDate": "01/01/2024", "endDate": "01/31/2024"}\n```')

        result = await extract_date_strings(llm, "January 2024", TODAY)

        assert result == DateRange(start_date="01/01/2024", end_date="01/31/2024")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            "",
            "not json at all",
            "Sure! Here is the range: 05/01/2024 - 06/01/2024",
            '["05/01/2024", "06/01/2024"]',
            '{"startDate": "05/01/2024"}',
            '{"startDate": "2024-05-01", "endDate": "2024-06-01"}',
            '{"startDate": "13/45/2024", "endDate": "06/15/2024"}',
            '{"startDate": null, "endDate": "06/15/2024"}',
        ],
    )
    async def test_malformed_response_falls_back(self, response: str):
        llm = FakeLLM(default=response)

        result = await extract_date_strings(llm, "anything", TODAY)

        assert result == FALLBACK


class TestConvertToUnixTimestamps:
    def test_bounds_are_local_midnight(self):
        window = convert_to_unix_timestamps(DateRange("06/01/2024", "06/15/2024"))

        assert window.oldest == int(datetime(2024, 6, 1).timestamp())
        assert window.latest == int(datetime(2024, 6, 15).timestamp())

    def test_five_messages_per_day(self):
        window = convert_to_unix_timestamps(DateRange("06/01/2024", "06/15/2024"))
        assert window.limit == 70

    def test_short_range_uses_floor(self):
        window = convert_to_unix_timestamps(DateRange("06/10/2024", "06/15/2024"))
        assert window.limit == 50

    def test_same_day(self):
        window = convert_to_unix_timestamps(DateRange("06/15/2024", "06/15/2024"))
        assert window.oldest == window.latest
        assert window.limit == 50

    def test_long_range_uses_cap(self):
        window = convert_to_unix_timestamps(DateRange("01/01/2023", "06/15/2024"))
        assert window.limit == 200

    def test_reversed_range_is_swapped(self):
        forward = convert_to_unix_timestamps(DateRange("06/01/2024", "06/15/2024"))
        reversed_ = convert_to_unix_timestamps(DateRange("06/15/2024", "06/01/2024"))

        assert reversed_ == forward
        assert reversed_.oldest <= reversed_.latest

    @pytest.mark.parametrize(
        "start,end",
        [
            ("06/15/2024", "06/15/2024"),
            ("06/14/2024", "06/15/2024"),
            ("05/16/2024", "06/15/2024"),
            ("02/01/2024", "03/31/2024"),
            ("01/01/2020", "12/31/2024"),
            ("12/31/2024", "01/01/2020"),
        ],
    )
    def test_limit_always_clamped(self, start: str, end: str):
        window = convert_to_unix_timestamps(DateRange(start, end))
        assert 50 <= window.limit <= 200
        assert window.oldest <= window.latest

    def test_invalid_date_raises(self):
        with pytest.raises(ValueError):
            convert_to_unix_timestamps(DateRange("not a date", "06/15/2024"))
