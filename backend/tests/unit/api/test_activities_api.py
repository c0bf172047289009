"""
Unit Tests for Activities API Endpoints
"""
import pytest
from httpx import AsyncClient

from spacece.models import Activity, DevelopmentDomain


async def add_activity(db_session, creator, age_min, age_max, **kwargs) -> Activity:
    record = Activity(
        title=kwargs.pop('title', 'Activity'),
        description=kwargs.pop('description', 'Something to do'),
        domain=kwargs.pop('domain', DevelopmentDomain.MOTOR),
        age_min=age_min,
        age_max=age_max,
        created_by=creator.id,
        **kwargs
    )
    db_session.add(record)
    await db_session.commit()
    await db_session.refresh(record)
    return record


class TestActivityCreation:
    """Test activity creation"""

    @pytest.mark.asyncio
    async def test_admin_creates(self, client: AsyncClient, admin, admin_headers):
        response = await client.post('/api/activities', json={
            'title': 'Stacking blocks',
            'description': 'Build a tower of three blocks',
            'domain': 'Motor',
            'ageRange': {'min': 12, 'max': 24},
            'materials': ['blocks'],
            'tags': ['fine-motor', 'play'],
        }, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()['data']
        assert data['createdBy'] == admin.id
        assert data['ageRange'] == {'min': 12, 'max': 24}
        assert data['duration'] == 15
        assert data['difficultyLevel'] == 'Medium'
        assert data['isApproved'] is True

    @pytest.mark.asyncio
    async def test_admin_created_activity_visible_to_parent(self, client: AsyncClient, admin_headers, parent_headers):
        created = await client.post('/api/activities', json={
            'title': 'Stack blocks',
            'description': 'Build a tower of three blocks',
            'domain': 'Motor',
            'ageRange': {'min': 12, 'max': 24},
        }, headers=admin_headers)
        assert created.status_code == 201
        activity_id = created.json()['data']['id']

        response = await client.get('/api/activities?domain=Motor', headers=parent_headers)

        assert response.status_code == 200
        assert response.json()['count'] == 1
        listed = response.json()['data'][0]
        assert listed['id'] == activity_id
        assert listed['title'] == 'Stack blocks'
        assert listed['domain'] == 'Motor'

    @pytest.mark.asyncio
    async def test_volunteer_cannot_create(self, client: AsyncClient, db_session, volunteer_headers):
        response = await client.post('/api/activities', json={
            'title': 'Stacking blocks',
            'description': 'Build a tower',
            'domain': 'Motor',
            'ageRange': {'min': 12, 'max': 24},
        }, headers=volunteer_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_inverted_age_range(self, client: AsyncClient, admin_headers):
        response = await client.post('/api/activities', json={
            'title': 'Stacking blocks',
            'description': 'Build a tower',
            'domain': 'Motor',
            'ageRange': {'min': 30, 'max': 24},
        }, headers=admin_headers)

        assert response.status_code == 400


class TestActivityListing:
    """Test filters and approval visibility"""

    @pytest.mark.asyncio
    async def test_unapproved_hidden_from_non_admin(self, client: AsyncClient, db_session, admin, admin_headers, parent_headers):
        approved = await add_activity(db_session, admin, 0, 12)
        draft = await add_activity(db_session, admin, 0, 12, is_approved=False)

        response = await client.get('/api/activities', headers=parent_headers)
        assert [a['id'] for a in response.json()['data']] == [approved.id]

        response = await client.get('/api/activities', headers=admin_headers)
        assert {a['id'] for a in response.json()['data']} == {approved.id, draft.id}

        response = await client.get(f'/api/activities/{draft.id}', headers=parent_headers)
        assert response.status_code == 403
        assert response.json()['message'] == 'This activity is not approved yet'

    @pytest.mark.asyncio
    async def test_domain_language_difficulty_filters(self, client: AsyncClient, db_session, admin, parent_headers):
        motor = await add_activity(db_session, admin, 0, 12, domain=DevelopmentDomain.MOTOR)
        await add_activity(db_session, admin, 0, 12, domain=DevelopmentDomain.LANGUAGE, language='Hindi')

        response = await client.get('/api/activities?domain=Motor', headers=parent_headers)
        assert [a['id'] for a in response.json()['data']] == [motor.id]

        response = await client.get('/api/activities?language=Hindi', headers=parent_headers)
        assert response.json()['count'] == 1

        response = await client.get('/api/activities?difficultyLevel=Hard', headers=parent_headers)
        assert response.json()['count'] == 0

    @pytest.mark.asyncio
    async def test_tags_match_any(self, client: AsyncClient, db_session, admin, parent_headers):
        music = await add_activity(db_session, admin, 0, 12, tags=['music', 'rhythm'])
        art = await add_activity(db_session, admin, 0, 12, tags=['art'])
        await add_activity(db_session, admin, 0, 12, tags=['outdoor'])

        response = await client.get('/api/activities?tags=music, art', headers=parent_headers)

        assert {a['id'] for a in response.json()['data']} == {music.id, art.id}

    @pytest.mark.asyncio
    async def test_unknown_domain(self, client: AsyncClient, parent_headers):
        response = await client.get('/api/activities?domain=Musical', headers=parent_headers)

        assert response.status_code == 400


class TestActivitiesByAge:
    """Test the age-in-months lookup"""

    @pytest.mark.asyncio
    async def test_age_inside_range(self, client: AsyncClient, db_session, admin, parent_headers):
        infant = await add_activity(db_session, admin, 0, 12)
        toddler = await add_activity(db_session, admin, 12, 36)
        await add_activity(db_session, admin, 36, 60)

        response = await client.get('/api/activities/age/12', headers=parent_headers)
        assert {a['id'] for a in response.json()['data']} == {infant.id, toddler.id}

        response = await client.get('/api/activities/age/24', headers=parent_headers)
        assert [a['id'] for a in response.json()['data']] == [toddler.id]

    @pytest.mark.asyncio
    async def test_non_numeric_age(self, client: AsyncClient, parent_headers):
        response = await client.get('/api/activities/age/toddler', headers=parent_headers)

        assert response.status_code == 400
        assert response.json()['message'] == 'Invalid age group format. Please provide age in months.'


class TestActivityUpdateAndDelete:
    """Test admin maintenance"""

    @pytest.mark.asyncio
    async def test_update_age_range(self, client: AsyncClient, db_session, admin, admin_headers):
        activity = await add_activity(db_session, admin, 0, 12)

        response = await client.put(f'/api/activities/{activity.id}', json={
            'ageRange': {'min': 6, 'max': 18},
            'difficultyLevel': 'Easy',
        }, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()['data']
        assert data['ageRange'] == {'min': 6, 'max': 18}
        assert data['difficultyLevel'] == 'Easy'
        assert data['title'] == 'Activity'

    @pytest.mark.asyncio
    async def test_parent_cannot_update(self, client: AsyncClient, db_session, admin, parent_headers):
        activity = await add_activity(db_session, admin, 0, 12)

        response = await client.put(f'/api/activities/{activity.id}', json={'title': 'Mine'}, headers=parent_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_deleted_activity_gone(self, client: AsyncClient, db_session, admin, admin_headers, parent_headers):
        activity = await add_activity(db_session, admin, 0, 12)

        response = await client.delete(f'/api/activities/{activity.id}', headers=admin_headers)
        assert response.status_code == 200
        assert response.json()['message'] == 'Activity deleted successfully'

        assert (await client.get(f'/api/activities/{activity.id}', headers=admin_headers)).status_code == 404
        assert (await client.get('/api/activities', headers=parent_headers)).json()['count'] == 0
