"""
app/parsing/filename_parser.py

Campaign name and reporting date extraction from export file names.

Recognised shapes, tried in order:

    "<campaign> DD_MM_YYYY - DD_MM_YYYY"   date range (display DD/MM/YYYY - DD/MM/YYYY)
    "<campaign> YYYY-MM-DD ..."            single ISO date
    "<campaign> - <anything>"              name before the first " - ", optional "YYYY Q<n>"
    "<campaign>"                           whole name

Every shape has a fallback, so extraction never raises.
"""

from __future__ import annotations

import re

from app.domain.campaign_analytics import CampaignMetadata

UNKNOWN_CAMPAIGN = "Unknown Campaign"
UNKNOWN_DATE = "Unknown Date"

NAME_SEPARATOR = " - "

_EXTENSION = re.compile(r"\.csv$", re.IGNORECASE)
_DATE_RANGE = re.compile(r"(\d{2})_(\d{2})_(\d{4})\s*-\s*(\d{2})_(\d{2})_(\d{4})")
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_QUARTER = re.compile(r"(\d{4})\s*Q(\d)", re.IGNORECASE)
_TRAILING_DASH = re.compile(r"\s*-\s*$")


def strip_extension(file_name: str) -> str:
    return _EXTENSION.sub("", file_name.strip())


def _campaign_before(name: str, start: int) -> str:
    return _TRAILING_DASH.sub("", name[:start].strip()).strip()


def extract_campaign_metadata(file_name: str) -> CampaignMetadata:
    """
    Parse campaign name and display date out of an uploaded file name.
    """

    name = strip_extension(file_name or "")

    range_match = _DATE_RANGE.search(name)
    if range_match:
        start_day, start_month, start_year, end_day, end_month, end_year = range_match.groups()
        start_iso = f"{start_year}-{start_month}-{start_day}"
        end_iso = f"{end_year}-{end_month}-{end_day}"
        return CampaignMetadata(
            campaign_name=_campaign_before(name, range_match.start()) or UNKNOWN_CAMPAIGN,
            display_date=(
                f"{start_day}/{start_month}/{start_year} - {end_day}/{end_month}/{end_year}"
            ),
            date=start_iso,
            start_date=start_iso,
            end_date=end_iso,
        )

    iso_match = _ISO_DATE.search(name)
    if iso_match:
        iso_date = iso_match.group(0)
        return CampaignMetadata(
            campaign_name=_campaign_before(name, iso_match.start()) or UNKNOWN_CAMPAIGN,
            display_date=iso_date,
            date=iso_date,
            start_date=iso_date,
            end_date=iso_date,
        )

    if NAME_SEPARATOR in name:
        campaign_name = name.split(NAME_SEPARATOR, 1)[0].strip()
        quarter_match = _QUARTER.search(name)
        display_date = (
            f"{quarter_match.group(1)} Q{quarter_match.group(2)}" if quarter_match else UNKNOWN_DATE
        )
        return CampaignMetadata(
            campaign_name=campaign_name or UNKNOWN_CAMPAIGN,
            display_date=display_date,
        )

    return CampaignMetadata(
        campaign_name=name.strip() or UNKNOWN_CAMPAIGN,
        display_date=UNKNOWN_DATE,
    )
