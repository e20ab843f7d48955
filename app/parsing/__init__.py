"""
app/parsing package marker.
"""

from app.parsing.csv_line_parser import clean_field, parse_csv_line, split_csv_lines
from app.parsing.filename_parser import UNKNOWN_CAMPAIGN, UNKNOWN_DATE, extract_campaign_metadata
from app.parsing.labels import format_number, to_title_case

__all__ = [
    "UNKNOWN_CAMPAIGN",
    "UNKNOWN_DATE",
    "clean_field",
    "extract_campaign_metadata",
    "format_number",
    "parse_csv_line",
    "split_csv_lines",
    "to_title_case",
]
