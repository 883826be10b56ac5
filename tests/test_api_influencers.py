from influencer_os.extensions import db
from influencer_os.models import Influencer


def test_health(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    assert res.get_json()['status'] == 'ok'


def test_requires_token(client):
    res = client.get('/api/influencers')
    assert res.status_code == 401
    assert res.get_json()['error'] == 'Unauthorized'


def test_invalid_token(client):
    res = client.get('/api/influencers', headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


def test_list_brands(client, auth_headers, brand):
    res = client.get('/api/brands', headers=auth_headers)
    assert res.status_code == 200
    assert [b['name'] for b in res.get_json()['brands']] == ['Miss Jones']


def test_list_influencers_with_campaign_counts(client, auth_headers, seeded):
    res = client.get('/api/influencers', headers=auth_headers)
    assert res.status_code == 200
    data = res.get_json()
    assert [i['name'] for i in data['influencers']] == ['Ana Bakes', 'Gina Foodie', 'Lee Cooks', 'Tom Eats']
    counts = {i['name']: i['campaign_count'] for i in data['influencers']}
    assert counts['Gina Foodie'] == 2
    assert counts['Tom Eats'] == 1
    assert data['pagination'] == {"page": 1, "limit": 50, "total": 4, "pages": 1}


def test_list_influencers_search_filter_sort(client, auth_headers, seeded):
    res = client.get('/api/influencers?search=FOOD', headers=auth_headers)
    assert [i['name'] for i in res.get_json()['influencers']] == ['Gina Foodie']

    res = client.get('/api/influencers?search=tomea', headers=auth_headers)
    assert [i['name'] for i in res.get_json()['influencers']] == ['Tom Eats']

    res = client.get('/api/influencers?platform=TikTok', headers=auth_headers)
    assert [i['name'] for i in res.get_json()['influencers']] == ['Tom Eats']

    res = client.get('/api/influencers?platform=all&sort=followers&order=desc', headers=auth_headers)
    assert [i['name'] for i in res.get_json()['influencers']] == [
        'Ana Bakes', 'Tom Eats', 'Gina Foodie', 'Lee Cooks']

    res = client.get('/api/influencers?sort=campaigns&order=desc&limit=1', headers=auth_headers)
    data = res.get_json()
    assert [i['name'] for i in data['influencers']] == ['Gina Foodie']
    assert data['pagination']['pages'] == 4


def test_list_influencers_pagination(client, auth_headers, seeded):
    res = client.get('/api/influencers?page=2&limit=3', headers=auth_headers)
    data = res.get_json()
    assert [i['name'] for i in data['influencers']] == ['Tom Eats']
    assert data['pagination'] == {"page": 2, "limit": 3, "total": 4, "pages": 2}


def test_create_influencer(client, auth_headers, app):
    res = client.post('/api/influencers', headers=auth_headers, json={
        "name": "  Nina Snacks ",
        "handle": "ninasnacks",
        "email": "nina@example.com",
        "platform": "instagram",
        "content_type": "",
        "rate": 400,
        "follower_count": 52000,
    })
    assert res.status_code == 201
    data = res.get_json()['influencer']
    assert data['name'] == 'Nina Snacks'
    assert data['content_type'] is None
    assert data['rate'] == 400
    assert Influencer.query.filter_by(name='Nina Snacks').count() == 1


def test_create_influencer_validation(client, auth_headers, app):
    res = client.post('/api/influencers', headers=auth_headers, json={"handle": "nobody"})
    assert res.status_code == 400
    assert 'name' in res.get_json()['details']

    res = client.post('/api/influencers', headers=auth_headers, json={"name": "X", "handle": "@x"})
    assert res.status_code == 400
    assert 'handle' in res.get_json()['details']

    res = client.post('/api/influencers', headers=auth_headers, json={"name": "X", "platform": "myspace"})
    assert res.status_code == 400

    res = client.post('/api/influencers', headers=auth_headers, json={"name": "X", "performance_rating": 7})
    assert res.status_code == 400


def test_get_influencer_profile(client, auth_headers, seeded):
    gina = seeded['influencers']['gina']
    res = client.get(f'/api/influencers/{gina.id}', headers=auth_headers)
    assert res.status_code == 200
    data = res.get_json()['influencer']
    assert data['name'] == 'Gina Foodie'
    assert sorted(a['campaign_name'] for a in data['assignments']) == ['Costco - Fall', 'Whole Foods - Holiday']
    assert data['total_earned'] == 400


def test_get_influencer_not_found(client, auth_headers, app):
    res = client.get('/api/influencers/does-not-exist', headers=auth_headers)
    assert res.status_code == 404


def test_update_influencer_notes_and_rating(client, auth_headers, seeded):
    lee = seeded['influencers']['lee']
    res = client.patch(f'/api/influencers/{lee.id}', headers=auth_headers, json={
        "notes": "Great turnaround",
        "performance_rating": 4.5,
    })
    assert res.status_code == 200

    db.session.expire_all()
    lee = db.session.get(Influencer, lee.id)
    assert lee.notes == 'Great turnaround'
    assert lee.performance_rating == 4.5
    assert lee.handle == 'leecooks'


def test_update_influencer_rejects_bad_email(client, auth_headers, seeded):
    lee = seeded['influencers']['lee']
    res = client.patch(f'/api/influencers/{lee.id}', headers=auth_headers, json={"email": "not-an-email"})
    assert res.status_code == 400
