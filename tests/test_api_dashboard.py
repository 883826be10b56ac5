def test_dashboard_stats(client, auth_headers, seeded):
    res = client.get(f"/api/dashboard/stats?brand_id={seeded['brand'].id}", headers=auth_headers)
    assert res.status_code == 200
    stats = res.get_json()['stats']
    assert stats['total_influencers'] == 4
    assert stats['active_in_campaign'] == 4
    assert stats['overdue'] == 2
    assert len(stats['active_campaigns']) == 1


def test_payment_queue(client, auth_headers, seeded):
    res = client.get(f"/api/payments/queue?brand_id={seeded['brand'].id}", headers=auth_headers)
    assert res.status_code == 200
    data = res.get_json()
    assert data['total'] == 2
    assert data['ready_to_pay'] == 1
    assert data['items'][0]['name'] == 'Ana Bakes'


def test_chase_list(client, auth_headers, seeded):
    res = client.get(f"/api/chase?brand_id={seeded['brand'].id}", headers=auth_headers)
    assert res.status_code == 200
    data = res.get_json()
    assert data['total'] == 2
    assert {i['pipeline_stage'] for i in data['items']} == {'contacted', 'brief_sent'}


def test_report_requires_known_brand(client, auth_headers, seeded):
    res = client.get('/api/reports', headers=auth_headers)
    assert res.status_code == 400

    res = client.get('/api/reports?brand_id=missing', headers=auth_headers)
    assert res.status_code == 404

    res = client.get(f"/api/reports?brand_id={seeded['brand'].id}", headers=auth_headers)
    assert res.status_code == 200
    assert res.get_json()['report']['summary']['total_campaigns'] == 2
