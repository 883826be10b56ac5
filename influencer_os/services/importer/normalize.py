"""
Cell normalization rules for the spreadsheet migration.

These must stay byte-for-byte compatible with the data already in the
database: a re-run only skips existing rows if names, handles and
campaign names come out exactly the same.
"""
import math
import re
from datetime import date, datetime, timedelta

YES_VALUES = ('yes', 'y')

# Days between the spreadsheet epoch (1899-12-30) and 1970-01-01
EXCEL_EPOCH_OFFSET = 25569
UNIX_EPOCH = date(1970, 1, 1)

_FLOAT_PREFIX = re.compile(r'^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')
_THOUSANDS = re.compile(r'^([\d.]+)\s*[kK]$')
_MILLIONS = re.compile(r'^([\d.]+)\s*[mM]$')
_RATE_IN_TEXT = re.compile(r'\$?([\d,]+)')
_EMAIL = re.compile(r'[\w.+-]+@[\w.-]+\.\w+', re.ASCII)
_TRAILING_NOTE = re.compile(r'\s*\(.*?\)\s*$')
_WHITESPACE = re.compile(r'\s+')


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _round_half_up(value):
    return int(math.floor(value + 0.5))


def _parse_float(text):
    """Leading-number parse: "500/post" -> 500.0, "abc" -> None."""
    match = _FLOAT_PREFIX.match(text)
    if not match:
        return None
    return float(match.group(0))


def cell_text(value):
    if value is None:
        return ''
    return str(value).strip()


def name_key(name):
    """Grouping key for influencer names: lowercase, whitespace collapsed."""
    return _WHITESPACE.sub(' ', str(name).lower())


def parse_follower_count(raw):
    """'16.2K' -> 16200, '1.1M' -> 1100000, 11000 -> 11000, '' -> None."""
    if raw is None or raw == '':
        return None
    if _is_number(raw):
        return _round_half_up(raw)

    s = str(raw).strip().replace(',', '')
    match = _THOUSANDS.match(s)
    if match:
        number = _parse_float(match.group(1))
        return None if number is None else _round_half_up(number * 1000)
    match = _MILLIONS.match(s)
    if match:
        number = _parse_float(match.group(1))
        return None if number is None else _round_half_up(number * 1000000)
    number = _parse_float(s)
    return None if number is None else _round_half_up(number)


def parse_rate(raw):
    """Strip $ and commas: '$1,200' -> 1200.0, '' -> None."""
    if raw is None or raw == '':
        return None
    if _is_number(raw):
        return raw
    s = re.sub(r'[$,]', '', str(raw).strip())
    return _parse_float(s)


def parse_first_rate(raw):
    """First dollar amount in a (possibly multi-line) rates cell."""
    text = cell_text(raw)
    if not text:
        return None
    match = _RATE_IN_TEXT.search(text)
    if not match:
        return None
    return parse_rate(match.group(0))


def clean_handle(raw):
    if not raw:
        return None
    s = str(raw).strip()
    if s.startswith('@'):
        s = s[1:]
    # Looks like an email or a URL, not a handle
    if '@' in s or 'http' in s or '.com' in s:
        return None
    # "ginafoodie (YT)" -> "ginafoodie"
    s = _TRAILING_NOTE.sub('', s, count=1).strip()
    return s or None


def clean_email(raw):
    if not raw:
        return None
    match = _EMAIL.search(str(raw).strip())
    return match.group(0).lower() if match else None


def _present(raw):
    return bool(raw) and bool(str(raw).strip())


def detect_platform(ig_handle, tiktok_handle):
    """
    Primary platform from which raw handle cells are filled in.
    Both present defaults to instagram (Miss Jones posts there first).
    """
    has_ig = _present(ig_handle)
    has_tt = _present(tiktok_handle)
    if has_ig:
        return 'instagram'
    if has_tt:
        return 'tiktok'
    return None


def pick_for_platform(platform, ig_value, tiktok_value):
    """Value for the detected platform, falling back to the other one."""
    if platform == 'tiktok':
        return tiktok_value or ig_value
    return ig_value or tiktok_value


def excel_serial_to_date(serial):
    """
    Spreadsheet serial day -> date, using the 25569-day offset to the Unix
    epoch. Day 60 (the phantom 1900-02-29) is not special-cased.
    Cells openpyxl already typed as dates pass through.
    """
    if isinstance(serial, datetime):
        return serial.date()
    if isinstance(serial, date):
        return serial
    if not serial or not _is_number(serial):
        return None
    return UNIX_EPOCH + timedelta(days=math.floor(serial - EXCEL_EPOCH_OFFSET))


def is_yes(value):
    return cell_text(value).lower() in YES_VALUES


def normalize_retailer(raw):
    retailer = str(raw or '').rstrip()
    if retailer in ('WF', 'WFM') or retailer.startswith('Whole Foods'):
        retailer = 'Whole Foods'
    if retailer in ('WM', 'WMT') or retailer.startswith('Walmart'):
        retailer = 'Walmart'
    if retailer.startswith('Costco'):
        retailer = 'Costco'
    if retailer.startswith('Sprouts'):
        retailer = 'Sprouts'
    return retailer


def build_campaign_name(retailer, campaign_field, product):
    if campaign_field and campaign_field != retailer:
        name = f"{retailer} - {campaign_field}"
    elif product:
        name = f"{retailer} - {product}"
    else:
        name = retailer
    return _WHITESPACE.sub(' ', name).strip()


class HeaderRow:
    """Label lookups over a tracker header row, -1 when a label is missing."""

    def __init__(self, cells):
        self.labels = ['' if c is None else str(c) for c in cells]

    def index(self, label, start=0):
        try:
            return self.labels.index(label, start)
        except ValueError:
            return -1

    def first_index(self, *labels):
        for label in labels:
            idx = self.index(label)
            if idx >= 0:
                return idx
        return -1

    def __contains__(self, label):
        return label in self.labels


def cell(row, idx):
    if idx < 0 or idx >= len(row):
        return ''
    value = row[idx]
    return '' if value is None else value


def _flag(row, headers, *labels):
    # First label with a non-empty cell decides, like "Paid?" before "Paid"
    for label in labels:
        text = cell_text(cell(row, headers.index(label)))
        if text:
            return text.lower() in YES_VALUES
    return False


def determine_pipeline_stage(row, headers):
    """Legacy yes/no columns -> stage, most advanced flag wins."""
    if _flag(row, headers, 'Paid?', 'Paid'):
        return 'paid'
    if _flag(row, headers, 'Invoice'):
        return 'invoice_received'
    if _flag(row, headers, 'W9 Recieved'):  # sic, as spelled in the sheet
        return 'w9_done'
    if _flag(row, headers, 'Content Recieved'):
        return 'content_received'
    if _flag(row, headers, 'Partnership Post'):
        return 'brief_sent'
    return 'contacted'


def determine_w9_status(row, headers):
    return 'received' if _flag(row, headers, 'W9 Recieved') else 'pending'


def determine_invoice_status(row, headers):
    return 'received' if _flag(row, headers, 'Invoice') else 'pending'


def determine_payment_status(row, headers):
    paid_idx = headers.first_index('Paid?', 'Paid')
    return 'paid' if is_yes(cell(row, paid_idx)) else 'unpaid'
