"""
Unit Tests for Visits API Endpoints
"""
import pytest
from datetime import datetime
from httpx import AsyncClient

from spacece.models import Visit, VisitLocation


async def add_visit(db_session, child, volunteer, visit_date, **kwargs) -> Visit:
    record = Visit(
        child_id=child.id,
        volunteer_id=volunteer.id,
        visit_date=visit_date,
        duration=kwargs.pop('duration', 45),
        location=kwargs.pop('location', VisitLocation.HOME),
        **kwargs
    )
    db_session.add(record)
    await db_session.commit()
    await db_session.refresh(record)
    return record


def visit_payload(child, **overrides) -> dict:
    payload = {
        'childId': child.id,
        'visitDate': '2024-05-10T10:00:00Z',
        'duration': 60,
        'location': 'Home',
        'activitiesConducted': [{'title': 'Picture book', 'domain': 'Language', 'duration': 20}],
        'childObservations': {'mood': 'Happy', 'participation': 'Active'},
        'parentInteraction': {'present': True, 'participation': 'Active'},
    }
    payload.update(overrides)
    return payload


class TestVisitCreation:
    """Test recording visits"""

    @pytest.mark.asyncio
    async def test_volunteer_records_visit(self, client: AsyncClient, db_session, child, volunteer, volunteer_headers):
        response = await client.post('/api/visits', json=visit_payload(child), headers=volunteer_headers)

        assert response.status_code == 201
        data = response.json()['data']
        assert data['volunteerId'] == volunteer.id
        assert data['volunteer']['id'] == volunteer.id
        assert data['child']['id'] == child.id
        assert data['childObservations']['mood'] == 'Happy'
        assert data['followUpNeeded'] is False

    @pytest.mark.asyncio
    async def test_stamps_last_visit_date(self, client: AsyncClient, db_session, child, volunteer_headers, parent_headers):
        await client.post('/api/visits', json=visit_payload(child), headers=volunteer_headers)

        response = await client.get(f'/api/children/{child.id}', headers=parent_headers)

        assert response.json()['data']['lastVisitDate'].startswith('2024-05-10T10:00:00')

    @pytest.mark.asyncio
    async def test_unassigned_volunteer_forbidden(
        self, client: AsyncClient, db_session, unassigned_child, volunteer_headers
    ):
        response = await client.post('/api/visits', json=visit_payload(unassigned_child), headers=volunteer_headers)

        assert response.status_code == 403
        await db_session.refresh(unassigned_child)
        assert unassigned_child.last_visit_date is None

    @pytest.mark.asyncio
    async def test_parent_cannot_record(self, client: AsyncClient, child, parent_headers):
        response = await client.post('/api/visits', json=visit_payload(child), headers=parent_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_must_name_volunteer(self, client: AsyncClient, child, admin_headers):
        response = await client.post('/api/visits', json=visit_payload(child), headers=admin_headers)

        assert response.status_code == 404
        assert response.json()['message'] == 'Valid volunteer not found'

    @pytest.mark.asyncio
    async def test_admin_records_for_volunteer(self, client: AsyncClient, child, volunteer, admin_headers):
        response = await client.post(
            '/api/visits', json=visit_payload(child, volunteerId=volunteer.id), headers=admin_headers
        )

        assert response.status_code == 201
        assert response.json()['data']['volunteerId'] == volunteer.id

    @pytest.mark.asyncio
    async def test_admin_names_non_volunteer(self, client: AsyncClient, db_session, child, parent, admin, admin_headers):
        response = await client.post(
            '/api/visits', json=visit_payload(child, volunteerId=parent.id), headers=admin_headers
        )
        assert response.status_code == 404
        assert response.json()['message'] == 'Valid volunteer not found'

        # admins count as volunteers
        response = await client.post(
            '/api/visits', json=visit_payload(child, volunteerId=admin.id), headers=admin_headers
        )
        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_missing_duration(self, client: AsyncClient, child, volunteer_headers):
        payload = visit_payload(child)
        del payload['duration']

        response = await client.post('/api/visits', json=payload, headers=volunteer_headers)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_deleted_child(self, client: AsyncClient, db_session, child, volunteer_headers):
        child.is_deleted = True
        await db_session.commit()

        response = await client.post('/api/visits', json=visit_payload(child), headers=volunteer_headers)

        assert response.status_code == 404


class TestVisitRetrieval:
    """Test reading and listing visits"""

    @pytest.mark.asyncio
    async def test_list_by_child_date_range(self, client: AsyncClient, db_session, child, volunteer, parent_headers):
        await add_visit(db_session, child, volunteer, datetime(2024, 1, 5, 10))
        march = await add_visit(db_session, child, volunteer, datetime(2024, 3, 5, 10))
        await add_visit(db_session, child, volunteer, datetime(2024, 3, 6, 10), is_deleted=True)

        response = await client.get(f'/api/visits/child/{child.id}', headers=parent_headers)
        assert response.json()['count'] == 2

        response = await client.get(
            f'/api/visits/child/{child.id}?startDate=2024-03-01T00:00:00Z&endDate=2024-03-31T23:59:59Z',
            headers=parent_headers
        )
        assert [v['id'] for v in response.json()['data']] == [march.id]

    @pytest.mark.asyncio
    async def test_other_parent_cannot_list(self, client: AsyncClient, child, other_parent_headers):
        response = await client.get(f'/api/visits/child/{child.id}', headers=other_parent_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_get_visit_scoping(
        self, client: AsyncClient, db_session, child, volunteer,
        parent_headers, other_parent_headers, other_volunteer_headers
    ):
        visit = await add_visit(db_session, child, volunteer, datetime(2024, 2, 1, 9))

        assert (await client.get(f'/api/visits/{visit.id}', headers=parent_headers)).status_code == 200
        assert (await client.get(f'/api/visits/{visit.id}', headers=other_parent_headers)).status_code == 403
        assert (await client.get(f'/api/visits/{visit.id}', headers=other_volunteer_headers)).status_code == 403

    @pytest.mark.asyncio
    async def test_list_by_volunteer(self, client: AsyncClient, db_session, child, volunteer, volunteer_headers):
        await add_visit(db_session, child, volunteer, datetime(2024, 2, 1, 9))
        latest = await add_visit(db_session, child, volunteer, datetime(2024, 4, 1, 9))

        response = await client.get(f'/api/visits/volunteer/{volunteer.id}', headers=volunteer_headers)

        data = response.json()['data']
        assert len(data) == 2
        # Newest first
        assert data[0]['id'] == latest.id

    @pytest.mark.asyncio
    async def test_volunteer_cannot_list_others(self, client: AsyncClient, volunteer, other_volunteer_headers):
        response = await client.get(f'/api/visits/volunteer/{volunteer.id}', headers=other_volunteer_headers)

        assert response.status_code == 403
        assert response.json()['message'] == 'Volunteers can only view their own visits'

    @pytest.mark.asyncio
    async def test_list_by_volunteer_unknown(self, client: AsyncClient, parent, admin_headers):
        response = await client.get(f'/api/visits/volunteer/{parent.id}', headers=admin_headers)

        assert response.status_code == 404
        assert response.json()['message'] == 'Volunteer not found'

    @pytest.mark.asyncio
    async def test_parent_cannot_list_by_volunteer(self, client: AsyncClient, volunteer, parent_headers):
        response = await client.get(f'/api/visits/volunteer/{volunteer.id}', headers=parent_headers)

        assert response.status_code == 403


class TestVisitUpdate:
    """Test updating visits"""

    @pytest.mark.asyncio
    async def test_recording_volunteer_updates(self, client: AsyncClient, db_session, child, volunteer, volunteer_headers):
        visit = await add_visit(db_session, child, volunteer, datetime(2024, 2, 1, 9))

        response = await client.put(f'/api/visits/{visit.id}', json={
            'followUpNeeded': True,
            'followUpReason': 'Speech delay',
            'statusUpdates': [{'status': 'Completed'}],
        }, headers=volunteer_headers)

        assert response.status_code == 200
        data = response.json()['data']
        assert data['followUpNeeded'] is True
        assert data['followUpReason'] == 'Speech delay'
        assert data['statusUpdates'][0]['status'] == 'Completed'
        assert data['duration'] == 45

    @pytest.mark.asyncio
    async def test_other_volunteer_forbidden(
        self, client: AsyncClient, db_session, child, volunteer, other_volunteer_headers
    ):
        visit = await add_visit(db_session, child, volunteer, datetime(2024, 2, 1, 9))

        response = await client.put(f'/api/visits/{visit.id}', json={'duration': 5}, headers=other_volunteer_headers)

        assert response.status_code == 403
        await db_session.refresh(visit)
        assert visit.duration == 45


class TestVisitDeletion:
    """Test soft delete"""

    @pytest.mark.asyncio
    async def test_admin_deletes(self, client: AsyncClient, db_session, child, volunteer, admin_headers):
        visit = await add_visit(db_session, child, volunteer, datetime(2024, 2, 1, 9))

        response = await client.delete(f'/api/visits/{visit.id}', headers=admin_headers)

        assert response.status_code == 200
        assert response.json()['message'] == 'Visit deleted successfully'
        listing = await client.get(f'/api/visits/child/{child.id}', headers=admin_headers)
        assert listing.json()['count'] == 0

    @pytest.mark.asyncio
    async def test_volunteer_cannot_delete(self, client: AsyncClient, db_session, child, volunteer, volunteer_headers):
        visit = await add_visit(db_session, child, volunteer, datetime(2024, 2, 1, 9))

        response = await client.delete(f'/api/visits/{visit.id}', headers=volunteer_headers)

        assert response.status_code == 403
