from datetime import date, datetime

import pytest

from influencer_os.services.importer.normalize import (
    HeaderRow,
    build_campaign_name,
    clean_email,
    clean_handle,
    detect_platform,
    determine_invoice_status,
    determine_payment_status,
    determine_pipeline_stage,
    determine_w9_status,
    excel_serial_to_date,
    name_key,
    normalize_retailer,
    parse_first_rate,
    parse_follower_count,
    parse_rate,
    pick_for_platform,
)


@pytest.mark.parametrize("raw, expected", [
    ("16.2K", 16200),
    ("1.1M", 1100000),
    ("218k", 218000),
    (11000, 11000),
    (11000.4, 11000),
    ("12,500", 12500),
    ("", None),
    (None, None),
    ("abc", None),
])
def test_parse_follower_count(raw, expected):
    assert parse_follower_count(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    ("$1,200", 1200),
    ("500", 500),
    ("", None),
    ("n/a", None),
    (750, 750),
])
def test_parse_rate(raw, expected):
    assert parse_rate(raw) == expected


def test_parse_first_rate_takes_first_amount():
    assert parse_first_rate("IG Reel: $1,500\nTikTok: $900") == 1500
    assert parse_first_rate("DM for rates") is None
    assert parse_first_rate(None) is None


@pytest.mark.parametrize("raw, expected", [
    ("@ginafoodie", "ginafoodie"),
    ("ginafoodie (YT)", "ginafoodie"),
    ("someone@example.com", None),
    ("http://x.com", None),
    ("instagram.com/gina", None),
    ("@", None),
    ("", None),
    (None, None),
])
def test_clean_handle(raw, expected):
    assert clean_handle(raw) == expected


def test_clean_email_extracts_and_lowercases():
    assert clean_email("Gina <Gina.Foodie@Example.COM> (mgr)") == "gina.foodie@example.com"
    assert clean_email("no email here") is None
    assert clean_email(None) is None


def test_detect_platform():
    assert detect_platform("ginafoodie", "") == "instagram"
    assert detect_platform("ginafoodie", "ginatok") == "instagram"
    assert detect_platform("", "ginatok") == "tiktok"
    assert detect_platform(None, "  ") is None


def test_pick_for_platform_falls_back_to_other_value():
    assert pick_for_platform("tiktok", 100, 200) == 200
    assert pick_for_platform("tiktok", 100, None) == 100
    assert pick_for_platform("instagram", None, 200) == 200
    assert pick_for_platform(None, 100, 200) == 100


def test_excel_serial_to_date():
    assert excel_serial_to_date(25569) == date(1970, 1, 1)
    assert excel_serial_to_date(45292) == date(2024, 1, 1)
    assert excel_serial_to_date(45292.75) == date(2024, 1, 1)
    assert excel_serial_to_date(datetime(2026, 2, 15, 9, 30)) == date(2026, 2, 15)
    assert excel_serial_to_date("") is None
    assert excel_serial_to_date("TBD") is None


@pytest.mark.parametrize("raw, expected", [
    ("WF", "Whole Foods"),
    ("WFM", "Whole Foods"),
    ("Whole Foods Market", "Whole Foods"),
    ("WM", "Walmart"),
    ("WMT", "Walmart"),
    ("Walmart ", "Walmart"),
    ("Costco SoCal", "Costco"),
    ("Sprouts Farmers", "Sprouts"),
    ("Target", "Target"),
    (None, ""),
])
def test_normalize_retailer(raw, expected):
    assert normalize_retailer(raw) == expected


def test_build_campaign_name():
    assert build_campaign_name("Whole Foods", "Holiday", "Granola") == "Whole Foods - Holiday"
    assert build_campaign_name("Whole Foods", "Whole Foods", "Granola") == "Whole Foods - Granola"
    assert build_campaign_name("Costco", "", "") == "Costco"
    assert build_campaign_name("Costco", "Big   Push", None) == "Costco - Big Push"


def test_name_key_collapses_case_and_whitespace():
    assert name_key("  Gina   Foodie") == name_key(" gina foodie")


HEADERS = HeaderRow(['Name', 'Email', 'Partnership Post', 'Content Recieved',
                     'W9 Recieved', 'Invoice', 'Paid?'])


def _row(partnership='', content='', w9='', invoice='', paid=''):
    return ['Gina', 'g@example.com', partnership, content, w9, invoice, paid]


@pytest.mark.parametrize("row, stage", [
    (_row(), 'contacted'),
    (_row(partnership='Yes'), 'brief_sent'),
    (_row(partnership='yes', content='Y'), 'content_received'),
    (_row(content='y', w9='YES'), 'w9_done'),
    (_row(w9='yes', invoice='yes'), 'invoice_received'),
    (_row(invoice='no', paid='yes'), 'paid'),
    (_row(content='maybe'), 'contacted'),
])
def test_determine_pipeline_stage_priority(row, stage):
    assert determine_pipeline_stage(row, HEADERS) == stage


def test_sub_statuses_follow_their_own_flags():
    row = _row(w9='yes', paid='y')
    assert determine_w9_status(row, HEADERS) == 'received'
    assert determine_invoice_status(row, HEADERS) == 'pending'
    assert determine_payment_status(row, HEADERS) == 'paid'


def test_paid_column_without_question_mark():
    headers = HeaderRow(['Name', 'Email', 'Paid'])
    row = ['Gina', 'g@example.com', 'Yes']
    assert determine_pipeline_stage(row, headers) == 'paid'
    assert determine_payment_status(row, headers) == 'paid'


def test_missing_flag_columns_default_to_earliest_states():
    headers = HeaderRow(['Name', 'Email'])
    row = ['Gina', 'g@example.com']
    assert determine_pipeline_stage(row, headers) == 'contacted'
    assert determine_w9_status(row, headers) == 'pending'
    assert determine_invoice_status(row, headers) == 'pending'
    assert determine_payment_status(row, headers) == 'unpaid'
