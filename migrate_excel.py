#!/usr/bin/env python
"""
One-shot migration of the coordination workbook into the database.

Usage:
    python migrate_excel.py [path/to/workbook.xlsx] [brand_id]

Defaults come from IMPORT_WORKBOOK_PATH / IMPORT_BRAND_ID. Safe to
re-run: rows already present are skipped, so a second run inserts nothing.
"""
import logging
import sys
import traceback

from influencer_os import create_app
from influencer_os.config import Config
from influencer_os.extensions import db
from influencer_os.models import Campaign, CampaignInfluencer, Influencer
from influencer_os.services.importer import (
    ImportAborted,
    WorkbookError,
    apply_import,
    build_import_plan,
    read_workbook,
)


def main():
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    path = sys.argv[1] if len(sys.argv) > 1 else Config.IMPORT_WORKBOOK_PATH
    brand_id = sys.argv[2] if len(sys.argv) > 2 else Config.IMPORT_BRAND_ID

    print("\n" + "=" * 60)
    print("  Excel -> database migration")
    print("=" * 60)
    print(f"  Workbook: {path}")
    print(f"  Brand:    {brand_id}")

    print("\n📖 Reading workbook...")
    sheets = read_workbook(path)
    print(f"   Sheets: {', '.join(sheets)}")

    plan = build_import_plan(sheets)
    for sheet, counts in plan.sheet_counts.items():
        print(f"   {sheet}: {counts['influencers']} influencers, {counts['assignments']} assignments")
    print(f"   Merged: {len(plan.influencers)} unique influencers "
          f"(from {plan.source_influencer_count} rows)")
    print(f"   Campaigns: {len(plan.campaigns)}")
    if plan.rejected:
        print(f"\n⚠️  {len(plan.rejected)} rows rejected:")
        for rejected in plan.rejected:
            print(f"   [{rejected.sheet}] row {rejected.row if rejected.row is not None else '-'}: {rejected.reason}")

    app = create_app()
    with app.app_context():
        print("\n💾 Writing to database...")
        report = apply_import(plan, brand_id)

        print("\n" + "=" * 60)
        print("  Summary")
        print("=" * 60)
        for entity, counts in report.counts.items():
            print(f"   {entity:<12} inserted={counts['inserted']:<4} "
                  f"skipped={counts['skipped']:<4} unmatched={counts['unmatched']}")

        print("\n🔎 Verifying...")
        print(f"   Influencers in DB: {db.session.query(Influencer).count()}")
        print(f"   Campaigns for brand: {Campaign.query.filter_by(brand_id=brand_id).count()}")
        print(f"   Assignments in DB: {db.session.query(CampaignInfluencer).count()}")

    print("\n✅ Migration complete")


if __name__ == '__main__':
    try:
        main()
    except (WorkbookError, ImportAborted) as e:
        print(f"\n❌ {e}")
        sys.exit(1)
    except Exception as e:
        print(f"\n❌ Migration failed, nothing was written: {e}")
        traceback.print_exc()
        sys.exit(1)
