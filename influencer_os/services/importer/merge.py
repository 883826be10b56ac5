from collections import OrderedDict

from influencer_os.services.importer.normalize import name_key

FILL_FIELDS = ('handle', 'email', 'platform', 'content_type', 'location')


def _keep_larger(current, candidate):
    if candidate and (not current or candidate > current):
        return candidate
    return current


def merge_influencers(records):
    """
    De-duplicate influencer records by name_key.

    Later records only fill fields the earlier ones left empty; rate and
    follower_count keep the larger value whatever the order.
    """
    merged = OrderedDict()
    for record in records:
        key = name_key(record['name'])
        existing = merged.get(key)
        if existing is None:
            merged[key] = dict(record)
            continue
        for field in FILL_FIELDS:
            existing[field] = existing.get(field) or record.get(field)
        existing['rate'] = _keep_larger(existing.get('rate'), record.get('rate'))
        existing['follower_count'] = _keep_larger(existing.get('follower_count'), record.get('follower_count'))
    return list(merged.values())


def campaign_key(campaign_name, quarter):
    return (campaign_name, quarter)


def _add_product(products, product):
    if not product:
        return products
    if not products:
        return product
    if product in [p.strip() for p in products.split(',')]:
        return products
    return f"{products}, {product}"


def collapse_campaigns(assignments):
    """
    One campaign per (display name, quarter). Collapsed rows keep the
    latest posting date as the deadline and the union of their products.
    """
    campaigns = OrderedDict()
    for assignment in assignments:
        key = campaign_key(assignment['campaign_name'], assignment['quarter'])
        posting_date = assignment.get('posting_date')
        existing = campaigns.get(key)
        if existing is None:
            campaigns[key] = {
                "name": assignment['campaign_name'],
                "retailer": assignment['retailer'],
                "quarter": assignment['quarter'],
                "products": assignment.get('product'),
                "posting_deadline": posting_date,
                "status": assignment.get('campaign_status', 'active'),
            }
            continue
        if posting_date and (not existing['posting_deadline'] or posting_date > existing['posting_deadline']):
            existing['posting_deadline'] = posting_date
        existing['products'] = _add_product(existing['products'], assignment.get('product'))
    return campaigns
