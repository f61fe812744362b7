"""Date range inference and conversion into Slack history windows."""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .llm import LLMClient, parse_json_response

logger = logging.getLogger(__name__)

DATE_FORMAT = "%m/%d/%Y"
DEFAULT_LOOKBACK_DAYS = 30
MESSAGES_PER_DAY = 5
MIN_LIMIT = 50
MAX_LIMIT = 200

DATE_EXTRACTION_PROMPT = """You are an expert at extracting date ranges from search instructions. Given today's date and search instructions, determine the appropriate date range and return it in MM/DD/YYYY format.

Rules:
- If user mentions "last week", "yesterday", "5 days ago", etc., calculate from today
- If user mentions specific dates like "January 2024", "last February", use those
- If user mentions "recent" or "latest", use past 7 days
- If NO date range specified, default to 30 days ago
- Always return both startDate and endDate in MM/DD/YYYY format

Return ONLY a JSON object: {"startDate": "MM/DD/YYYY", "endDate": "MM/DD/YYYY"}

CRITICAL: Your response must be valid JSON. Do not add any text or wrap your response."""


@dataclass(frozen=True)
class DateRange:
    """An inclusive date range as MM/DD/YYYY strings."""

    start_date: str
    end_date: str

    def to_dict(self) -> dict[str, str]:
        return {"startDate": self.start_date, "endDate": self.end_date}


@dataclass(frozen=True)
class TimeWindow:
    """Unix-second bounds and a message cap for a history fetch."""

    oldest: int
    latest: int
    limit: int


def format_date(value: date) -> str:
    """Format a date as zero-padded MM/DD/YYYY."""
    return value.strftime(DATE_FORMAT)


def parse_date(value: str) -> datetime:
    """Parse an MM/DD/YYYY string as local midnight."""
    return datetime.strptime(value.strip(), DATE_FORMAT)


def get_today_date_string(today: date | None = None) -> str:
    """Return today's date as MM/DD/YYYY."""
    return format_date(today or date.today())


def default_date_range(today_date_string: str) -> DateRange:
    """The fallback range: the 30 days ending today."""
    today = parse_date(today_date_string)
    start = today - timedelta(days=DEFAULT_LOOKBACK_DAYS)
    return DateRange(start_date=format_date(start), end_date=format_date(today))


async def extract_date_strings(
    llm: LLMClient,
    search_instructions: str,
    today_date_string: str,
) -> DateRange:
    """Ask the model which date range the search instructions refer to.

    Any response that is not a JSON object with two valid MM/DD/YYYY dates
    resolves to the 30 days ending ``today_date_string``. This never raises
    for a malformed response.
    """
    prompt = (
        f"Today's date: {today_date_string}\n"
        f'Search instructions: "{search_instructions}"\n\n'
        "Extract the date range:"
    )
    response = await llm.complete(prompt, system=DATE_EXTRACTION_PROMPT)

    try:
        data = parse_json_response(response)
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        start_date = str(data["startDate"]).strip()
        end_date = str(data["endDate"]).strip()
        parse_date(start_date)
        parse_date(end_date)
    except (ValueError, KeyError) as e:
        logger.warning(f"Could not parse date range, using last {DEFAULT_LOOKBACK_DAYS} days: {e}")
        return default_date_range(today_date_string)

    return DateRange(start_date=start_date, end_date=end_date)


def convert_to_unix_timestamps(date_range: DateRange) -> TimeWindow:
    """Convert a date range into history-fetch bounds.

    The limit is five messages per day, clamped to [50, 200]. A reversed
    range is swapped so that ``oldest <= latest`` always holds.
    """
    start = parse_date(date_range.start_date)
    end = parse_date(date_range.end_date)
    if end < start:
        start, end = end, start

    oldest = math.floor(start.timestamp())
    latest = math.floor(end.timestamp())

    # Calendar days, so a DST shift inside the range does not add a day
    days_diff = (end.date() - start.date()).days
    limit = min(max(days_diff * MESSAGES_PER_DAY, MIN_LIMIT), MAX_LIMIT)

    return TimeWindow(oldest=oldest, latest=latest, limit=limit)
