from unittest.mock import Mock

from googleapiclient.errors import HttpError


def _payload(**overrides):
    body = {
        "title": "Họp dự án mới",
        "start": "2024-01-11T15:30",
        "end": "2024-01-11T16:30",
        "location": "Hội trường",
        "description": "Mang theo laptop",
    }
    body.update(overrides)
    return body


def test_create_event_inserts_into_configured_calendar(client, auth_headers, fake_provider, settings):
    r = client.post('/api/create-event', json=_payload(), headers=auth_headers)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data['message'] == 'Event created successfully!'
    assert data['event']['id'] == 'evt_1'

    calendar_id, body = fake_provider.inserted[0]
    assert calendar_id == settings.google_calendar_id
    assert body['summary'] == 'Họp dự án mới'
    assert body['start'] == {'dateTime': '2024-01-11T15:30:00+07:00', 'timeZone': 'Asia/Ho_Chi_Minh'}
    assert body['end'] == {'dateTime': '2024-01-11T16:30:00+07:00', 'timeZone': 'Asia/Ho_Chi_Minh'}
    assert body['location'] == 'Hội trường'
    assert body['description'] == 'Mang theo laptop'


def test_create_event_optional_fields_may_be_omitted(client, auth_headers, fake_provider):
    r = client.post('/api/create-event', json=_payload(location=None, description=None), headers=auth_headers)
    assert r.status_code == 200, r.text
    _, body = fake_provider.inserted[0]
    assert 'location' not in body
    assert 'description' not in body


def test_create_event_missing_required_fields(client, auth_headers, fake_provider):
    for missing in ('title', 'start', 'end'):
        r = client.post('/api/create-event', json=_payload(**{missing: None}), headers=auth_headers)
        assert r.status_code == 400
        assert r.json()['code'] == 'EVENT_FIELDS_REQUIRED'
    assert fake_provider.inserted == []


def test_create_event_end_before_start_returns_400(client, auth_headers, fake_provider):
    r = client.post('/api/create-event', json=_payload(end="2024-01-11T15:00"), headers=auth_headers)
    assert r.status_code == 400
    body = r.json()
    assert body['code'] == 'EVENT_INVALID_TIME'
    assert 'end before start' in body['message']
    assert fake_provider.inserted == []


def test_create_event_unparseable_time_returns_400(client, auth_headers):
    r = client.post('/api/create-event', json=_payload(start="tomorrow"), headers=auth_headers)
    assert r.status_code == 400
    assert r.json()['code'] == 'EVENT_INVALID_TIME'


def test_create_event_google_failure_is_generic_502(client, auth_headers, fake_provider):
    fake_provider.exc = HttpError(Mock(status=403, reason="Forbidden"), b'{"error": {"message": "quota"}}')
    r = client.post('/api/create-event', json=_payload(), headers=auth_headers)
    assert r.status_code == 502
    body = r.json()
    assert body['message'] == 'Failed to create event.'
    assert body['code'] == 'GOOGLE_API_ERROR'
    assert 'error' in body


def test_resubmission_creates_duplicate(client, auth_headers, fake_provider):
    client.post('/api/create-event', json=_payload(), headers=auth_headers)
    client.post('/api/create-event', json=_payload(), headers=auth_headers)
    assert len(fake_provider.inserted) == 2
