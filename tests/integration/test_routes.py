"""
HTTP tests through the Flask test client.
"""
import pytest


@pytest.fixture
def admin_id(client):
    response = client.post('/api/v1/profiles', json={
        'email': 'coach@example.com', 'full_name': 'Coach Admin', 'is_admin': True
    })
    return response.get_json()['profile']['id']


@pytest.fixture
def student_id(client):
    response = client.post('/api/v1/profiles', json={
        'email': 'student@example.com', 'full_name': 'Sam Student'
    })
    return response.get_json()['profile']['id']


@pytest.fixture
def stem_id(client, admin_id):
    response = client.post('/api/v1/categories', json={
        'admin_id': admin_id, 'name': 'STEM', 'xp_multiplier': 2.5
    })
    assert response.status_code == 201
    return response.get_json()['category']['id']


def log_activity(client, user_id, category_id, hours, **extra):
    payload = {
        'user_id': user_id,
        'category_id': category_id,
        'title': 'Robotics build night',
        'date': '2026-03-01',
        'duration_hours': hours,
    }
    payload.update(extra)
    return client.post('/api/v1/activities', json=payload)


class TestHealth:

    def test_health(self, client):
        response = client.get('/api/v1/health')

        assert response.status_code == 200
        body = response.get_json()
        assert body['database_available'] is True
        assert body['kafka_enabled'] is False


class TestProfileRoutes:
    """Registration and profile reads."""

    def test_register_and_get(self, client, student_id):
        response = client.get(f'/api/v1/profiles/{student_id}')

        assert response.status_code == 200
        profile = response.get_json()['profile']
        assert profile['full_name'] == 'Sam Student'
        assert profile['level'] == 1

    def test_duplicate_email(self, client, student_id):
        response = client.post('/api/v1/profiles', json={
            'email': 'student@example.com', 'full_name': 'Again'
        })

        assert response.status_code == 409
        assert response.get_json()['success'] is False

    def test_missing_fields(self, client):
        response = client.post('/api/v1/profiles', json={'email': 'x@example.com'})

        assert response.status_code == 400
        assert 'full_name' in response.get_json()['error']

    def test_not_json(self, client):
        response = client.post('/api/v1/profiles', data='nope', content_type='text/plain')

        assert response.status_code == 400

    def test_unknown_profile(self, client):
        response = client.get('/api/v1/profiles/404')

        assert response.status_code == 404
        assert response.get_json() == {'success': False, 'error': 'Profile 404 not found'}

    def test_update(self, client, student_id):
        response = client.put(f'/api/v1/profiles/{student_id}', json={'school': 'North High'})

        assert response.status_code == 200
        assert response.get_json()['profile']['school'] == 'North High'

    def test_string_flags_are_parsed(self, client, student_id):
        response = client.put(f'/api/v1/profiles/{student_id}', json={'is_public': 'no'})
        assert response.get_json()['profile']['is_public'] is False

        response = client.post('/api/v1/profiles', json={
            'email': 'fake@example.com', 'full_name': 'Not Admin', 'is_admin': 'false'
        })
        assert response.status_code == 201
        assert response.get_json()['profile']['is_admin'] is False

    def test_unparseable_flag(self, client, student_id):
        response = client.put(f'/api/v1/profiles/{student_id}', json={'is_public': 'sometimes'})

        assert response.status_code == 400
        assert 'is_public' in response.get_json()['error']

    def test_report_card(self, client, student_id, stem_id):
        log_activity(client, student_id, stem_id, 2)

        response = client.get(f'/api/v1/profiles/{student_id}/report-card')

        card = response.get_json()['report_card']
        assert card['total_xp'] == 250
        assert card['profile']['total_xp'] == 250

    def test_reconcile_requires_admin(self, client, student_id):
        response = client.post(
            f'/api/v1/profiles/{student_id}/reconcile', json={'admin_id': student_id}
        )

        assert response.status_code == 403


class TestActivityRoutes:
    """Logging, feed and kudos over HTTP."""

    def test_log_activity(self, client, student_id, stem_id):
        response = log_activity(client, student_id, stem_id, 2)

        assert response.status_code == 201
        body = response.get_json()
        assert body['activity']['xp_earned'] == 250
        assert body['profile']['total_xp'] == 250

    @pytest.mark.parametrize('hours', [0, -1, 'two', 25, 1e308])
    def test_invalid_duration(self, client, student_id, stem_id, hours):
        response = log_activity(client, student_id, stem_id, hours)

        assert response.status_code == 400

    def test_invalid_date(self, client, student_id, stem_id):
        response = log_activity(client, student_id, stem_id, 1, date='03/01/2026')

        assert response.status_code == 400

    def test_unknown_category(self, client, student_id):
        response = log_activity(client, student_id, 999, 1)

        assert response.status_code == 400

    def test_feed_and_kudos(self, client, admin_id, student_id, stem_id):
        activity_id = log_activity(client, student_id, stem_id, 1).get_json()['activity']['id']

        response = client.post(f'/api/v1/activities/{activity_id}/kudos', json={'user_id': admin_id})
        assert response.get_json()['kudos_count'] == 1

        feed = client.get(f'/api/v1/activities/feed?viewer_id={admin_id}').get_json()['data']
        assert feed[0]['viewer_has_kudoed'] is True
        assert feed[0]['profile']['full_name'] == 'Sam Student'

    @pytest.mark.parametrize('flag', ['false', 'False', '0', False])
    def test_unposted_activity_stays_out_of_feed(self, client, student_id, stem_id, flag):
        response = log_activity(client, student_id, stem_id, 1, is_posted=flag)

        assert response.status_code == 201
        assert response.get_json()['activity']['is_posted'] is False
        assert client.get('/api/v1/activities/feed').get_json()['data'] == []

    def test_unparseable_is_posted(self, client, student_id, stem_id):
        response = log_activity(client, student_id, stem_id, 1, is_posted='maybe')

        assert response.status_code == 400
        assert response.get_json() == {'success': False, 'error': 'is_posted must be true or false'}

    def test_feed_bad_limit(self, client):
        response = client.get('/api/v1/activities/feed?limit=abc')

        assert response.status_code == 400


class TestAdminRoutes:
    """Verification queue and badge management."""

    def test_verify_flow(self, client, admin_id, student_id, stem_id, monkeypatch):
        import config.settings as settings
        monkeypatch.setattr(settings, 'AUTO_APPROVE_ACTIVITIES', False)
        activity_id = log_activity(client, student_id, stem_id, 2).get_json()['activity']['id']

        pending = client.get(f'/api/v1/admin/pending?admin_id={admin_id}').get_json()
        assert [a['id'] for a in pending['data']] == [activity_id]

        response = client.post(f'/api/v1/admin/verify/{activity_id}', json={
            'admin_id': admin_id, 'status': 'approved'
        })
        assert response.status_code == 200
        assert response.get_json()['profile']['total_xp'] == 250

        again = client.post(f'/api/v1/admin/verify/{activity_id}', json={
            'admin_id': admin_id, 'status': 'denied'
        })
        assert again.status_code == 409

    def test_pending_requires_admin(self, client, student_id):
        response = client.get(f'/api/v1/admin/pending?admin_id={student_id}')

        assert response.status_code == 403

    def test_badges(self, client, admin_id, student_id, stem_id):
        response = client.post('/api/v1/admin/badges', json={
            'admin_id': admin_id,
            'name': 'STEM Starter',
            'category_id': stem_id,
            'criteria': {'hours_amount': 1},
            'tier': 'silver'
        })
        assert response.status_code == 201
        badge_id = response.get_json()['badge']['id']

        body = log_activity(client, student_id, stem_id, 1).get_json()
        assert [b['id'] for b in body['badges_unlocked']] == [badge_id]

        award = client.post(f'/api/v1/admin/badges/{badge_id}/award', json={
            'admin_id': admin_id, 'user_id': student_id
        })
        assert award.status_code == 409

        earned = client.get(f'/api/v1/profiles/{student_id}/badges').get_json()['data']
        assert earned[0]['badge']['tier'] == 'silver'

        catalogue = client.get(f'/api/v1/badges?category_id={stem_id}').get_json()['data']
        assert [b['name'] for b in catalogue] == ['STEM Starter']


class TestCategoryRoutes:

    def test_list_and_detail(self, client, student_id, stem_id):
        log_activity(client, student_id, stem_id, 5)

        categories = client.get('/api/v1/categories').get_json()['data']
        assert [c['slug'] for c in categories] == ['stem']

        detail = client.get(f'/api/v1/categories/{stem_id}?user_id={student_id}').get_json()
        assert detail['stats']['progress_percentage'] == pytest.approx(10.0)

        board = client.get(f'/api/v1/categories/{stem_id}/leaderboard?limit=1').get_json()
        assert board['data'][0]['rank'] == 1
        assert board['data'][0]['total_xp'] == 625

    def test_unknown_category(self, client):
        assert client.get('/api/v1/categories/999').status_code == 404

    def test_create_requires_admin(self, client, student_id):
        response = client.post('/api/v1/categories', json={'admin_id': student_id, 'name': 'Music'})

        assert response.status_code == 403

    def test_create_sub_skill(self, client, admin_id, student_id, stem_id):
        response = client.post(f'/api/v1/categories/{stem_id}/sub-skills', json={
            'admin_id': admin_id, 'name': 'Robotics', 'icon': 'Bot'
        })
        assert response.status_code == 201
        assert response.get_json()['sub_skill']['name'] == 'Robotics'

        duplicate = client.post(f'/api/v1/categories/{stem_id}/sub-skills', json={
            'admin_id': admin_id, 'name': 'Robotics'
        })
        assert duplicate.status_code == 409

        refused = client.post(f'/api/v1/categories/{stem_id}/sub-skills', json={
            'admin_id': student_id, 'name': 'Coding'
        })
        assert refused.status_code == 403

        detail = client.get(f'/api/v1/categories/{stem_id}').get_json()
        assert [(s['name'], s['icon']) for s in detail['sub_skills']] == [('Robotics', 'Bot')]


class TestGoalRoutes:

    def test_goal_lifecycle(self, client, student_id, stem_id):
        response = client.post('/api/v1/goals', json={
            'user_id': student_id,
            'category_id': stem_id,
            'target_hours': 2,
            'period': 'custom',
            'start_date': '2026-02-01',
            'end_date': '2026-04-01'
        })
        assert response.status_code == 201
        goal_id = response.get_json()['goal']['id']

        log_activity(client, student_id, stem_id, 2)

        goals = client.get(f'/api/v1/goals?user_id={student_id}').get_json()['data']
        assert goals[0]['is_completed'] is True

        delete = client.delete(f'/api/v1/goals/{goal_id}?user_id={student_id}')
        assert delete.status_code == 409

    def test_custom_goal_needs_end_date(self, client, student_id, stem_id):
        response = client.post('/api/v1/goals', json={
            'user_id': student_id, 'category_id': stem_id, 'target_hours': 2, 'period': 'custom'
        })

        assert response.status_code == 400

    def test_list_requires_user(self, client):
        assert client.get('/api/v1/goals').status_code == 400
