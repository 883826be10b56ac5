"""
Reporting Service - aggregates behind the dashboard, pipeline header,
payment queue, chase list and reports pages.

Every function takes the brand scope and "today" explicitly; nothing
reads a selected-brand global.
"""
import logging
from collections import OrderedDict
from datetime import date
from typing import Dict, List, Optional

from influencer_os.extensions import db
from influencer_os.models import Campaign, CampaignInfluencer, Influencer, Payment
from influencer_os.services.pipeline import (
    EARLY_STAGES,
    PAYMENT_QUEUE_STAGES,
    PIPELINE_STAGES,
    is_content_received_or_later,
    is_overdue,
    is_ready_to_pay,
)

logger = logging.getLogger(__name__)

TOP_INFLUENCER_LIMIT = 10


def _campaign_query(brand_id: Optional[str] = None):
    query = Campaign.query
    if brand_id:
        query = query.filter(Campaign.brand_id == brand_id)
    return query


def _influencers_by_id(influencer_ids) -> Dict[str, Influencer]:
    influencer_ids = list(set(influencer_ids))
    if not influencer_ids:
        return {}
    return {i.id: i for i in Influencer.query.filter(Influencer.id.in_(influencer_ids)).all()}


def _assignments_for(campaign_ids, stages=None) -> List[CampaignInfluencer]:
    if not campaign_ids:
        return []
    query = CampaignInfluencer.query.filter(CampaignInfluencer.campaign_id.in_(campaign_ids))
    if stages:
        query = query.filter(CampaignInfluencer.pipeline_stage.in_(stages))
    return query.all()


def payments_by_assignment(assignment_ids) -> Dict[str, float]:
    totals = {}
    if not assignment_ids:
        return totals
    rows = (db.session.query(Payment.campaign_influencer_id, Payment.amount)
            .filter(Payment.campaign_influencer_id.in_(list(assignment_ids)))
            .all())
    for assignment_id, amount in rows:
        totals[assignment_id] = totals.get(assignment_id, 0) + (amount or 0)
    return totals


def pipeline_cards(campaign_id: str) -> List[dict]:
    """Board cards for one campaign, shaped for PipelineBoard."""
    assignments = _assignments_for([campaign_id])
    influencers = _influencers_by_id(a.influencer_id for a in assignments)
    cards = []
    for assignment in assignments:
        influencer = influencers.get(assignment.influencer_id)
        cards.append({
            "id": assignment.influencer_id,
            "campaign_influencer_id": assignment.id,
            "name": influencer.name if influencer else 'Unknown',
            "handle": influencer.handle if influencer else None,
            "follower_count": influencer.follower_count if influencer else None,
            "rate": influencer.rate if influencer else None,
            "deliverable": assignment.deliverable,
            "pipeline_stage": assignment.pipeline_stage,
        })
    return cards


def campaign_stats(campaign: Campaign, cards: List[dict], today: Optional[date] = None) -> dict:
    today = today or date.today()
    paid = payments_by_assignment(c['campaign_influencer_id'] for c in cards)
    return {
        "influencer_count": len(cards),
        "budget": campaign.budget or 0,
        "content_received": sum(1 for c in cards if is_content_received_or_later(c['pipeline_stage'])),
        "paid_out": sum(paid.values()),
        "overdue": sum(1 for c in cards if is_overdue(c['pipeline_stage'], campaign.posting_deadline, today)),
    }


def payment_queue(brand_id: Optional[str] = None) -> List[dict]:
    """Assignments waiting on paperwork or payment, ready-to-pay first."""
    campaigns = {c.id: c for c in _campaign_query(brand_id).all()}
    assignments = _assignments_for(list(campaigns), PAYMENT_QUEUE_STAGES)
    influencers = _influencers_by_id(a.influencer_id for a in assignments)

    items = []
    for assignment in assignments:
        influencer = influencers.get(assignment.influencer_id)
        campaign = campaigns.get(assignment.campaign_id)
        items.append({
            "id": assignment.id,
            "influencer_id": assignment.influencer_id,
            "campaign_id": assignment.campaign_id,
            "name": influencer.name if influencer else 'Unknown',
            "handle": influencer.handle if influencer else None,
            "rate": influencer.rate if influencer else None,
            "campaign_name": campaign.name if campaign else 'Unknown',
            "pipeline_stage": assignment.pipeline_stage,
            "w9_status": assignment.w9_status,
            "invoice_status": assignment.invoice_status,
            "payment_status": assignment.payment_status,
            "ready_to_pay": is_ready_to_pay(assignment.w9_status, assignment.invoice_status),
        })

    # sort is stable, so ties keep query order
    items.sort(key=lambda item: not item['ready_to_pay'])
    return items


def chase_list(brand_id: Optional[str] = None, today: Optional[date] = None) -> List[dict]:
    """Early-stage assignments on campaigns past their posting deadline."""
    today = today or date.today()
    campaigns = {
        c.id: c for c in _campaign_query(brand_id)
        .filter(Campaign.posting_deadline.isnot(None), Campaign.posting_deadline < today)
        .all()
    }
    assignments = _assignments_for(list(campaigns), EARLY_STAGES)
    influencers = _influencers_by_id(a.influencer_id for a in assignments)

    items = []
    for assignment in assignments:
        influencer = influencers.get(assignment.influencer_id)
        campaign = campaigns[assignment.campaign_id]
        items.append({
            "id": assignment.id,
            "influencer_id": assignment.influencer_id,
            "name": influencer.name if influencer else 'Unknown',
            "handle": influencer.handle if influencer else None,
            "email": influencer.email if influencer else None,
            "pipeline_stage": assignment.pipeline_stage,
            "deliverable": assignment.deliverable,
            "campaign_name": campaign.name,
            "posting_deadline": campaign.posting_deadline.isoformat(),
            "days_overdue": max(0, (today - campaign.posting_deadline).days),
        })

    items.sort(key=lambda item: item['days_overdue'], reverse=True)
    return items


def dashboard_stats(brand_id: Optional[str] = None, today: Optional[date] = None) -> dict:
    today = today or date.today()

    total_influencers = Influencer.query.count()
    active_campaigns = _campaign_query(brand_id).filter(Campaign.status == 'active').all()
    active_ids = [c.id for c in active_campaigns]

    active_assignments = _assignments_for(active_ids)
    paid = payments_by_assignment(a.id for a in active_assignments)

    overdue_ids = {c.id for c in active_campaigns
                   if c.posting_deadline is not None and c.posting_deadline < today}
    overdue = [a for a in active_assignments
               if a.campaign_id in overdue_ids and a.pipeline_stage in EARLY_STAGES]
    influencers = _influencers_by_id(a.influencer_id for a in overdue)
    campaign_names = {c.id: c.name for c in active_campaigns}

    counts = {}
    for assignment in active_assignments:
        counts[assignment.campaign_id] = counts.get(assignment.campaign_id, 0) + 1

    return {
        "total_influencers": total_influencers,
        "active_in_campaign": len(active_assignments),
        "budget_allocated": sum(c.budget or 0 for c in active_campaigns),
        "paid_out": sum(paid.values()),
        "overdue": len(overdue),
        "needs_attention": [
            {
                "id": a.id,
                "influencer_id": a.influencer_id,
                "name": influencers[a.influencer_id].name if a.influencer_id in influencers else 'Unknown',
                "handle": influencers[a.influencer_id].handle if a.influencer_id in influencers else None,
                "pipeline_stage": a.pipeline_stage,
                "campaign_name": campaign_names.get(a.campaign_id, 'Unknown'),
            }
            for a in overdue
        ],
        "active_campaigns": [
            {
                "id": c.id,
                "name": c.name,
                "quarter": c.quarter,
                "influencer_count": counts.get(c.id, 0),
            }
            for c in active_campaigns
        ],
    }


def brand_report(brand_id: str) -> dict:
    """Totals, per-campaign performance, stage distribution and top influencers."""
    campaigns = _campaign_query(brand_id).all()
    assignments = _assignments_for([c.id for c in campaigns])
    paid = payments_by_assignment(a.id for a in assignments)

    summary = {
        "total_campaigns": len(campaigns),
        "total_influencers": len({a.influencer_id for a in assignments}),
        "total_budget": sum(c.budget or 0 for c in campaigns),
        "total_paid": sum(paid.values()),
    }

    by_campaign = {}
    for assignment in assignments:
        by_campaign.setdefault(assignment.campaign_id, []).append(assignment)

    rows = []
    for campaign in campaigns:
        linked = by_campaign.get(campaign.id, [])
        posted = sum(1 for a in linked if a.pipeline_stage == 'posted')
        rows.append({
            "id": campaign.id,
            "name": campaign.name,
            "retailer": campaign.retailer,
            "quarter": campaign.quarter,
            "influencer_count": len(linked),
            "budget": campaign.budget or 0,
            "paid_out": sum(paid.get(a.id, 0) for a in linked),
            "completion_rate": int(posted * 100 / len(linked) + 0.5) if linked else 0,
        })
    # quarter descending, then name ascending
    rows.sort(key=lambda r: r['name'])
    rows.sort(key=lambda r: r['quarter'] or '', reverse=True)

    active_ids = {c.id for c in campaigns if c.status == 'active'}
    distribution = OrderedDict((stage, 0) for stage in PIPELINE_STAGES)
    for assignment in assignments:
        if assignment.campaign_id in active_ids and assignment.pipeline_stage in distribution:
            distribution[assignment.pipeline_stage] += 1

    return {
        "summary": summary,
        "campaigns": rows,
        "pipeline_distribution": [{"stage": s, "count": n} for s, n in distribution.items()],
        "top_influencers": _top_influencers(assignments, paid),
    }


def _top_influencers(assignments, paid):
    grouped = OrderedDict()
    for assignment in assignments:
        entry = grouped.setdefault(assignment.influencer_id, {
            "campaign_ids": set(), "earned": 0, "stage_sum": 0, "count": 0,
        })
        entry['campaign_ids'].add(assignment.campaign_id)
        entry['earned'] += paid.get(assignment.id, 0)
        if assignment.pipeline_stage in PIPELINE_STAGES:
            entry['stage_sum'] += PIPELINE_STAGES.index(assignment.pipeline_stage)
        entry['count'] += 1

    ranked = sorted(grouped.items(), key=lambda kv: len(kv[1]['campaign_ids']), reverse=True)
    ranked = ranked[:TOP_INFLUENCER_LIMIT]
    influencers = _influencers_by_id(influencer_id for influencer_id, _ in ranked)

    top = []
    for influencer_id, entry in ranked:
        influencer = influencers.get(influencer_id)
        top.append({
            "id": influencer_id,
            "name": influencer.name if influencer else 'Unknown',
            "handle": influencer.handle if influencer else None,
            "campaign_count": len(entry['campaign_ids']),
            "total_earned": entry['earned'],
            "avg_stage_index": int(entry['stage_sum'] / entry['count'] + 0.5) if entry['count'] else 0,
        })
    return top
