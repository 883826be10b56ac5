from influencer_os.extensions import db
from influencer_os.models import CampaignInfluencer, Payment


def test_add_influencer_to_campaign(client, auth_headers, seeded):
    fall = seeded['campaigns']['fall']
    tom = seeded['influencers']['tom']

    res = client.post('/api/assignments', headers=auth_headers, json={
        "campaign_id": fall.id, "influencer_id": tom.id, "deliverable": "1 Reel",
    })
    assert res.status_code == 201
    data = res.get_json()['assignment']
    assert data['pipeline_stage'] == 'contacted'
    assert data['deliverable'] == '1 Reel'
    assert data['ready_to_pay'] is False

    res = client.post('/api/assignments', headers=auth_headers, json={
        "campaign_id": fall.id, "influencer_id": tom.id,
    })
    assert res.status_code == 409
    assert CampaignInfluencer.query.filter_by(campaign_id=fall.id, influencer_id=tom.id).count() == 1


def test_add_to_missing_campaign_or_influencer(client, auth_headers, seeded):
    tom = seeded['influencers']['tom']
    fall = seeded['campaigns']['fall']

    res = client.post('/api/assignments', headers=auth_headers,
                      json={"campaign_id": "missing", "influencer_id": tom.id})
    assert res.status_code == 404
    res = client.post('/api/assignments', headers=auth_headers,
                      json={"campaign_id": fall.id, "influencer_id": "missing"})
    assert res.status_code == 404


def test_set_any_stage_in_any_order(client, auth_headers, seeded):
    ana = seeded['assignments']['ana']

    for stage in ('posted', 'contacted', 'paid'):
        res = client.patch(f'/api/assignments/{ana.id}/stage', headers=auth_headers,
                           json={"pipeline_stage": stage})
        assert res.status_code == 200
        assert res.get_json()['assignment']['pipeline_stage'] == stage

    db.session.expire_all()
    ana = db.session.get(CampaignInfluencer, ana.id)
    assert ana.pipeline_stage == 'paid'
    # sub-statuses do not move with the stage
    assert ana.w9_status == 'received'
    assert ana.payment_status == 'unpaid'


def test_invalid_stage_is_rejected(client, auth_headers, seeded):
    tom = seeded['assignments']['tom']
    res = client.patch(f'/api/assignments/{tom.id}/stage', headers=auth_headers,
                       json={"pipeline_stage": "shipped"})
    assert res.status_code == 400

    db.session.expire_all()
    assert db.session.get(CampaignInfluencer, tom.id).pipeline_stage == 'contacted'

    res = client.patch('/api/assignments/missing/stage', headers=auth_headers,
                       json={"pipeline_stage": "paid"})
    assert res.status_code == 404


def test_update_statuses(client, auth_headers, seeded):
    lee = seeded['assignments']['lee']
    res = client.patch(f'/api/assignments/{lee.id}/status', headers=auth_headers, json={
        "w9_status": "received",
        "invoice_status": "received",
        "deliverable": "2 Reels",
    })
    assert res.status_code == 200
    data = res.get_json()['assignment']
    assert data['ready_to_pay'] is True
    assert data['deliverable'] == '2 Reels'
    assert data['pipeline_stage'] == 'content_received'


def test_update_statuses_validation(client, auth_headers, seeded):
    lee = seeded['assignments']['lee']
    res = client.patch(f'/api/assignments/{lee.id}/status', headers=auth_headers, json={})
    assert res.status_code == 400

    res = client.patch(f'/api/assignments/{lee.id}/status', headers=auth_headers,
                       json={"invoice_status": "complete"})
    assert res.status_code == 400

    res = client.patch(f'/api/assignments/{lee.id}/status', headers=auth_headers,
                       json={"w9_status": "not_required"})
    assert res.status_code == 200


def test_request_invoice(client, auth_headers, seeded):
    lee = seeded['assignments']['lee']
    res = client.post(f'/api/assignments/{lee.id}/request-invoice', headers=auth_headers)
    assert res.status_code == 200
    assert res.get_json()['assignment']['invoice_status'] == 'sent'

    res = client.post(f'/api/assignments/{lee.id}/request-invoice', headers=auth_headers)
    assert res.status_code == 400


def test_record_and_list_payments(client, auth_headers, seeded):
    ana = seeded['assignments']['ana']
    res = client.post(f'/api/assignments/{ana.id}/payments', headers=auth_headers, json={
        "amount": 800, "date_sent": "2026-02-20", "method": "PayPal",
    })
    assert res.status_code == 201
    assert res.get_json()['payment']['date_sent'] == '2026-02-20'

    client.post(f'/api/assignments/{ana.id}/payments', headers=auth_headers, json={"amount": 50.5})

    res = client.get(f'/api/assignments/{ana.id}/payments', headers=auth_headers)
    data = res.get_json()
    assert len(data['payments']) == 2
    assert data['total_paid'] == 850.5
    assert Payment.query.filter_by(campaign_influencer_id=ana.id).count() == 2


def test_payment_amount_must_be_positive(client, auth_headers, seeded):
    ana = seeded['assignments']['ana']
    res = client.post(f'/api/assignments/{ana.id}/payments', headers=auth_headers, json={"amount": 0})
    assert res.status_code == 400
    res = client.post(f'/api/assignments/{ana.id}/payments', headers=auth_headers, json={})
    assert res.status_code == 400
