#!/usr/bin/env python
"""
Apply pending schema migrations (brands, influencers, campaigns,
campaign_influencers, payments) before the API starts.
"""
import sys
import os
import traceback

print("=" * 60)
print("INFLUENCER OS SCHEMA MIGRATION")
print("=" * 60)

db_url = os.getenv('DATABASE_URL')
if db_url:
    print(f"✓ DATABASE_URL is set")
    print(f"  Host: {db_url.split('@')[1].split('/')[0] if '@' in db_url else 'local'}")
else:
    print("! DATABASE_URL not set, using the local SQLite file from Config")

try:
    from influencer_os import create_app
    from influencer_os.extensions import db
    from flask_migrate import upgrade

    app = create_app()
    with app.app_context():
        print("\nChecking database connection...")
        with db.engine.connect():
            print("✓ Database connection successful")

        print("\nRunning alembic upgrade to head...")
        upgrade()
        print("✓ Migrations completed successfully")
except Exception as e:
    print(f"\n✗ Migration failed: {e}")
    traceback.print_exc()
    sys.exit(1)

print("\n" + "=" * 60)
print("MIGRATION SCRIPT COMPLETED SUCCESSFULLY")
print("=" * 60)
