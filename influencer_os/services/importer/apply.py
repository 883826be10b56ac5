"""
Transactional apply stage of the spreadsheet migration.

Every lookup is by natural key so re-running the same workbook inserts
nothing: influencers by case-insensitive name, campaigns by
case-insensitive name + quarter + brand, assignments by
(campaign_id, influencer_id). Any database error rolls back the whole run.
"""
import logging

from sqlalchemy import func

from influencer_os.extensions import db
from influencer_os.models import Brand, Campaign, CampaignInfluencer, Influencer
from influencer_os.services.importer.merge import campaign_key
from influencer_os.services.importer.normalize import name_key

logger = logging.getLogger(__name__)


class ImportAborted(Exception):
    """The import cannot start, e.g. the target brand does not exist."""


class ImportReport:
    ENTITIES = ('influencers', 'campaigns', 'assignments')

    def __init__(self, rejected=None):
        self.counts = {
            entity: {"inserted": 0, "skipped": 0, "unmatched": 0}
            for entity in self.ENTITIES
        }
        self.rejected = list(rejected or [])

    def count(self, entity, outcome):
        self.counts[entity][outcome] += 1

    def total(self, entity):
        return sum(self.counts[entity].values())


def _upsert_influencers(session, influencers, report):
    ids = {}
    for record in influencers:
        existing = (session.query(Influencer.id)
                    .filter(func.lower(Influencer.name) == func.lower(record['name']))
                    .first())
        if existing:
            ids[name_key(record['name'])] = existing.id
            report.count('influencers', 'skipped')
            continue

        influencer = Influencer(
            name=record['name'],
            handle=record.get('handle'),
            email=record.get('email'),
            platform=record.get('platform'),
            content_type=record.get('content_type'),
            location=record.get('location'),
            rate=record.get('rate'),
            follower_count=record.get('follower_count'),
            notes=None,
        )
        session.add(influencer)
        session.flush()  # Generates id without committing
        ids[name_key(record['name'])] = influencer.id
        report.count('influencers', 'inserted')
        logger.info("Inserted influencer %s (%s, %s followers)", record['name'],
                    record.get('platform') or 'unknown', record.get('follower_count') or '?')
    return ids


def _upsert_campaigns(session, campaigns, brand_id, report):
    ids = {}
    for key, campaign in campaigns.items():
        existing = (session.query(Campaign.id)
                    .filter(func.lower(Campaign.name) == func.lower(campaign['name']),
                            Campaign.quarter == campaign['quarter'],
                            Campaign.brand_id == brand_id)
                    .first())
        if existing:
            ids[key] = existing.id
            report.count('campaigns', 'skipped')
            continue

        row = Campaign(
            brand_id=brand_id,
            retailer=campaign['retailer'],
            name=campaign['name'],
            quarter=campaign['quarter'],
            products=campaign['products'],
            posting_deadline=campaign['posting_deadline'],
            status=campaign['status'],
        )
        session.add(row)
        session.flush()
        ids[key] = row.id
        report.count('campaigns', 'inserted')
        logger.info("Inserted campaign %s (%s, %s)", campaign['name'], campaign['quarter'], campaign['retailer'])
    return ids


def _insert_assignments(session, assignments, influencer_ids, campaign_ids, report):
    for assignment in assignments:
        influencer_id = influencer_ids.get(name_key(assignment['influencer_name']))
        campaign_id = campaign_ids.get(campaign_key(assignment['campaign_name'], assignment['quarter']))

        if not influencer_id:
            logger.warning("No influencer match for: %r", assignment['influencer_name'])
            report.count('assignments', 'unmatched')
            continue
        if not campaign_id:
            logger.warning("No campaign match for: %r (%s)", assignment['campaign_name'], assignment['quarter'])
            report.count('assignments', 'unmatched')
            continue

        existing = (session.query(CampaignInfluencer.id)
                    .filter_by(campaign_id=campaign_id, influencer_id=influencer_id)
                    .first())
        if existing:
            report.count('assignments', 'skipped')
            continue

        session.add(CampaignInfluencer(
            campaign_id=campaign_id,
            influencer_id=influencer_id,
            pipeline_stage=assignment['pipeline_stage'],
            deliverable=assignment.get('deliverable'),
            w9_status=assignment['w9_status'],
            invoice_status=assignment['invoice_status'],
            payment_status=assignment['payment_status'],
        ))
        # Flush so a repeated pair later in the same batch is seen as existing
        session.flush()
        report.count('assignments', 'inserted')


def apply_import(plan, brand_id, session=None):
    """
    Write an ImportPlan inside one transaction and return an ImportReport.
    Raises ImportAborted for an unknown brand; database errors roll back
    and propagate unchanged.
    """
    session = session or db.session

    if session.get(Brand, brand_id) is None:
        raise ImportAborted(f"Brand {brand_id} not found")

    report = ImportReport(rejected=plan.rejected)
    try:
        influencer_ids = _upsert_influencers(session, plan.influencers, report)
        campaign_ids = _upsert_campaigns(session, plan.campaigns, brand_id, report)
        _insert_assignments(session, plan.assignments, influencer_ids, campaign_ids, report)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Import failed, rolled back")
        raise

    logger.info("Import committed: %s", report.counts)
    return report
