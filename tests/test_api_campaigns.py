from influencer_os.extensions import db
from influencer_os.models import Campaign, CampaignInfluencer


def test_create_campaign_with_influencers(client, auth_headers, seeded):
    tom = seeded['influencers']['tom']
    lee = seeded['influencers']['lee']
    res = client.post('/api/campaigns', headers=auth_headers, json={
        "brand_id": seeded['brand'].id,
        "name": "Sprouts - Spring",
        "retailer": "Sprouts",
        "quarter": "Q2 2026",
        "budget": 3000,
        "posting_deadline": "2026-05-01",
        "influencers": [
            {"influencer_id": tom.id, "deliverable": "1 TikTok"},
            {"influencer_id": lee.id},
        ],
    })
    assert res.status_code == 201
    data = res.get_json()['campaign']
    assert data['status'] == 'active'
    assert data['posting_deadline'] == '2026-05-01'
    assert data['influencer_count'] == 2

    rows = CampaignInfluencer.query.filter_by(campaign_id=data['id']).all()
    assert len(rows) == 2
    for row in rows:
        assert row.pipeline_stage == 'contacted'
        assert row.w9_status == 'pending'
        assert row.invoice_status == 'pending'
        assert row.payment_status == 'unpaid'
    assert {r.deliverable for r in rows} == {'1 TikTok', None}


def test_create_campaign_requires_brand_and_name(client, auth_headers, seeded):
    res = client.post('/api/campaigns', headers=auth_headers, json={"name": "No brand"})
    assert res.status_code == 400
    assert 'brand_id' in res.get_json()['details']

    res = client.post('/api/campaigns', headers=auth_headers, json={"brand_id": seeded['brand'].id, "name": "  "})
    assert res.status_code == 400

    res = client.post('/api/campaigns', headers=auth_headers, json={"brand_id": "missing", "name": "Ghost"})
    assert res.status_code == 404


def test_create_campaign_rejects_unknown_or_duplicate_influencers(client, auth_headers, seeded):
    tom = seeded['influencers']['tom']
    brand_id = seeded['brand'].id

    res = client.post('/api/campaigns', headers=auth_headers, json={
        "brand_id": brand_id, "name": "Dupes",
        "influencers": [{"influencer_id": tom.id}, {"influencer_id": tom.id}],
    })
    assert res.status_code == 400

    res = client.post('/api/campaigns', headers=auth_headers, json={
        "brand_id": brand_id, "name": "Unknown",
        "influencers": [{"influencer_id": "nobody"}],
    })
    assert res.status_code == 404
    assert Campaign.query.filter_by(name='Unknown').count() == 0


def test_list_campaigns_filters(client, auth_headers, seeded):
    brand_id = seeded['brand'].id
    res = client.get(f'/api/campaigns?brand_id={brand_id}', headers=auth_headers)
    assert res.get_json()['total'] == 2

    res = client.get(f'/api/campaigns?brand_id={brand_id}&status=completed', headers=auth_headers)
    assert [c['name'] for c in res.get_json()['campaigns']] == ['Costco - Fall']

    res = client.get('/api/campaigns?brand_id=other', headers=auth_headers)
    assert res.get_json()['campaigns'] == []


def test_get_and_update_campaign(client, auth_headers, seeded):
    holiday = seeded['campaigns']['holiday']
    res = client.get(f'/api/campaigns/{holiday.id}', headers=auth_headers)
    assert res.status_code == 200
    assert res.get_json()['campaign']['influencer_count'] == 4

    res = client.patch(f'/api/campaigns/{holiday.id}', headers=auth_headers,
                       json={"status": "completed", "budget": 6500})
    assert res.status_code == 200
    db.session.expire_all()
    holiday = db.session.get(Campaign, holiday.id)
    assert holiday.status == 'completed'
    assert holiday.budget == 6500

    res = client.patch(f'/api/campaigns/{holiday.id}', headers=auth_headers, json={"status": "archived"})
    assert res.status_code == 400

    res = client.get('/api/campaigns/missing', headers=auth_headers)
    assert res.status_code == 404


def test_campaign_pipeline_board(client, auth_headers, seeded):
    holiday = seeded['campaigns']['holiday']
    res = client.get(f'/api/campaigns/{holiday.id}/pipeline', headers=auth_headers)
    assert res.status_code == 200
    data = res.get_json()

    assert [c['key'] for c in data['columns']] == data['stages']
    assert len(data['columns']) == 7
    by_stage = {c['key']: [card['name'] for card in c['items']] for c in data['columns']}
    assert by_stage['contacted'] == ['Tom Eats']
    assert by_stage['brief_sent'] == ['Gina Foodie']
    assert by_stage['invoice_received'] == ['Ana Bakes']
    assert by_stage['posted'] == []
    assert data['columns'][3]['label'] == 'W9 Done'

    assert data['stats'] == {
        "influencer_count": 4,
        "budget": 5000,
        "content_received": 2,
        "paid_out": 0,
        "overdue": 2,
    }


def test_update_campaign_rejects_blank_name(client, auth_headers, seeded):
    holiday = seeded['campaigns']['holiday']
    res = client.patch(f'/api/campaigns/{holiday.id}', headers=auth_headers, json={"name": "   "})
    assert res.status_code == 400
    assert 'name' in res.get_json()['details']

    db.session.expire_all()
    assert db.session.get(Campaign, holiday.id).name == 'Whole Foods - Holiday'


def test_update_campaign_blank_optional_text_becomes_null(client, auth_headers, seeded):
    holiday = seeded['campaigns']['holiday']
    res = client.patch(f'/api/campaigns/{holiday.id}', headers=auth_headers, json={
        "name": " Whole Foods - Winter ",
        "retailer": "  ",
        "region": "",
    })
    assert res.status_code == 200
    data = res.get_json()['campaign']
    assert data['name'] == 'Whole Foods - Winter'
    assert data['retailer'] is None
    assert data['region'] is None
