"""
Sheet layout adapters.

Each known tab layout gets one adapter that turns raw rows (lists of cell
values) into influencer records and assignment records. Rows the adapter
cannot use are reported as RejectedRow instead of raising.
"""
from collections import namedtuple

from influencer_os.services.importer.normalize import (
    HeaderRow,
    build_campaign_name,
    cell,
    cell_text,
    clean_email,
    clean_handle,
    detect_platform,
    determine_invoice_status,
    determine_payment_status,
    determine_pipeline_stage,
    determine_w9_status,
    excel_serial_to_date,
    normalize_retailer,
    parse_first_rate,
    parse_follower_count,
    parse_rate,
    pick_for_platform,
)

RejectedRow = namedtuple('RejectedRow', ['sheet', 'row', 'reason'])

HEADER_SEARCH_ROWS = 5
SUMMARY_NAMES = ('GIRL SCOUTS',)


def influencer_record(name, handle=None, email=None, platform=None, content_type=None,
                      location=None, rate=None, follower_count=None):
    return {
        "name": name,
        "handle": handle,
        "email": email,
        "platform": platform,
        "content_type": content_type,
        "location": location,
        "rate": rate,
        "follower_count": follower_count,
    }


class SheetParseResult:
    def __init__(self, sheet):
        self.sheet = sheet
        self.influencers = []
        self.assignments = []
        self.rejected = []

    def reject(self, row_number, reason):
        self.rejected.append(RejectedRow(self.sheet, row_number, reason))


class SheetLayout:
    """Base adapter. Subclasses implement parse(rows)."""

    def __init__(self, sheet):
        self.sheet = sheet

    def parse(self, rows):
        raise NotImplementedError

    @staticmethod
    def _is_blank(row):
        return not any(cell_text(value) for value in row)


class RosterLayout(SheetLayout):
    """
    "Influencers" master roster. Fixed positions, header on the first row:
    name, email, IG handle, IG followers, TikTok handle, TikTok followers,
    content type, location, rates.
    """

    NAME, EMAIL, IG_HANDLE, IG_FOLLOWERS, TT_HANDLE, TT_FOLLOWERS, CONTENT_TYPE, LOCATION, RATES = range(9)

    def parse(self, rows):
        result = SheetParseResult(self.sheet)
        for number, row in enumerate(rows[1:], start=2):
            name = cell_text(cell(row, self.NAME))
            if not name:
                if not self._is_blank(row):
                    result.reject(number, 'missing name')
                continue

            raw_ig = cell(row, self.IG_HANDLE)
            raw_tt = cell(row, self.TT_HANDLE)
            platform = detect_platform(raw_ig, raw_tt)

            result.influencers.append(influencer_record(
                name=name,
                handle=pick_for_platform(platform, clean_handle(raw_ig), clean_handle(raw_tt)),
                email=clean_email(cell(row, self.EMAIL)),
                platform=platform,
                content_type=cell_text(cell(row, self.CONTENT_TYPE)) or None,
                location=cell_text(cell(row, self.LOCATION)) or None,
                rate=parse_first_rate(cell(row, self.RATES)),
                follower_count=pick_for_platform(
                    platform,
                    parse_follower_count(cell(row, self.IG_FOLLOWERS)),
                    parse_follower_count(cell(row, self.TT_FOLLOWERS)),
                ),
            ))
        return result


class TrackerLayout(SheetLayout):
    """
    Quarterly "Influencer Tracker" tabs. The header row is found by label
    and columns are looked up by name, so the 2025 and 2026 tabs share
    this adapter even though their columns differ.

    The 2026 tab has no "Retailer" column; its "Campaign" column holds
    the retailer instead, so a blank retailer falls back to "Campaign".
    """

    def __init__(self, sheet, quarter, campaign_status='active'):
        super().__init__(sheet)
        self.quarter = quarter
        self.campaign_status = campaign_status

    @staticmethod
    def find_header(rows):
        for idx, row in enumerate(rows[:HEADER_SEARCH_ROWS]):
            headers = HeaderRow(row)
            if 'Name' in headers and 'Email' in headers:
                return idx, headers
        return -1, None

    @staticmethod
    def is_summary_row(name):
        return name in SUMMARY_NAMES or name.startswith('Q') or 'TTL' in name

    def parse(self, rows):
        result = SheetParseResult(self.sheet)
        header_idx, headers = self.find_header(rows)
        if header_idx < 0:
            result.reject(None, 'no header row with "Name" and "Email"')
            return result

        columns = {
            'name': headers.index('Name'),
            'email': headers.index('Email'),
            'ig_handle': headers.index('IG Handle'),
            'ig_followers': headers.index('Follower Count (~)'),
            'tt_handle': headers.index('TikTok Handle'),
            'content_type': headers.index('Content Type'),
            'price': headers.index('Price'),
            'retailer': headers.index('Retailer'),
            'campaign': headers.index('Campaign'),
            'product': headers.index('Product'),
            'deliverable': headers.index('Deliverables'),
            'posting_date': headers.index('Posting Date'),
        }
        # TikTok follower count is the second "Follower Count (~)" column
        columns['tt_followers'] = (
            headers.index('Follower Count (~)', columns['ig_followers'] + 1)
            if columns['ig_followers'] >= 0 else -1
        )

        for number, row in enumerate(rows[header_idx + 1:], start=header_idx + 2):
            name = cell_text(cell(row, columns['name']))
            if not name:
                if not self._is_blank(row):
                    result.reject(number, 'missing name')
                continue
            if self.is_summary_row(name):
                result.reject(number, 'summary row')
                continue

            result.influencers.append(self._influencer(row, columns, name))

            assignment = self._assignment(row, columns, headers, name)
            if assignment is None:
                result.reject(number, 'no retailer')
                continue
            assignment['row'] = number
            result.assignments.append(assignment)
        return result

    def _influencer(self, row, columns, name):
        raw_ig = cell(row, columns['ig_handle'])
        raw_tt = cell(row, columns['tt_handle'])
        platform = detect_platform(raw_ig, raw_tt)
        return influencer_record(
            name=name,
            handle=pick_for_platform(platform, clean_handle(raw_ig), clean_handle(raw_tt)),
            email=clean_email(cell(row, columns['email'])),
            platform=platform,
            content_type=cell_text(cell(row, columns['content_type'])) or None,
            rate=parse_rate(cell(row, columns['price'])),
            follower_count=pick_for_platform(
                platform,
                parse_follower_count(cell(row, columns['ig_followers'])),
                parse_follower_count(cell(row, columns['tt_followers'])),
            ),
        )

    def _assignment(self, row, columns, headers, name):
        retailer = cell_text(cell(row, columns['retailer']))
        campaign_field = cell_text(cell(row, columns['campaign']))
        product = cell_text(cell(row, columns['product']))

        if not retailer and columns['campaign'] >= 0:
            retailer = campaign_field
        retailer = normalize_retailer(retailer)
        if not retailer:
            return None

        return {
            "influencer_name": name,
            "retailer": retailer,
            "campaign_name": build_campaign_name(retailer, campaign_field, product),
            "product": product or None,
            "deliverable": cell_text(cell(row, columns['deliverable'])) or None,
            "pipeline_stage": determine_pipeline_stage(row, headers),
            "w9_status": determine_w9_status(row, headers),
            "invoice_status": determine_invoice_status(row, headers),
            "payment_status": determine_payment_status(row, headers),
            "posting_date": excel_serial_to_date(cell(row, columns['posting_date'])),
            "quarter": self.quarter,
            "campaign_status": self.campaign_status,
        }


# Trackers first: the roster only fills gaps the trackers leave
DEFAULT_LAYOUTS = (
    TrackerLayout('2025 Influencer Tracker', quarter='Q4 2025', campaign_status='completed'),
    TrackerLayout('2026 Influencer Tracker', quarter='Q1 2026', campaign_status='active'),
    RosterLayout('Influencers'),
)
