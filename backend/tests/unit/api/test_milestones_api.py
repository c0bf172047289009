"""
Unit Tests for Milestones API Endpoints
"""
import pytest
from httpx import AsyncClient

from spacece.models import Milestone, DevelopmentDomain, MilestoneStatus


async def add_milestone(db_session, child, assessor, domain=DevelopmentDomain.MOTOR,
                        status=MilestoneStatus.IN_PROGRESS, **kwargs) -> Milestone:
    record = Milestone(
        child_id=child.id,
        domain=domain,
        title=kwargs.pop('title', 'Stands with support'),
        status=status,
        assessed_by=assessor.id,
        **kwargs
    )
    db_session.add(record)
    await db_session.commit()
    await db_session.refresh(record)
    return record


class TestMilestoneCreation:
    """Test milestone creation"""

    @pytest.mark.asyncio
    async def test_volunteer_records_milestone(self, client: AsyncClient, child, volunteer, volunteer_headers):
        response = await client.post('/api/milestones', json={
            'childId': child.id,
            'domain': 'Language',
            'title': 'Says two-word phrases',
            'expectedAgeRange': {'min': 18, 'max': 24},
            'status': 'In Progress',
        }, headers=volunteer_headers)

        assert response.status_code == 201
        data = response.json()['data']
        assert data['assessedBy'] == volunteer.id
        assert data['assessor'] == {'id': volunteer.id, 'name': volunteer.name, 'email': volunteer.email}
        assert data['expectedAgeRange'] == {'min': 18, 'max': 24}
        assert data['status'] == 'In Progress'

    @pytest.mark.asyncio
    async def test_achieved_requires_date(self, client: AsyncClient, child, volunteer_headers):
        response = await client.post('/api/milestones', json={
            'childId': child.id, 'domain': 'Motor', 'title': 'Walks', 'status': 'Achieved',
        }, headers=volunteer_headers)

        assert response.status_code == 400
        assert response.json()['error'] == 'VALIDATION_ERROR'

    @pytest.mark.asyncio
    async def test_parent_records_for_own_child(self, client: AsyncClient, child, parent, parent_headers):
        response = await client.post('/api/milestones', json={
            'childId': child.id, 'domain': 'Social', 'title': 'Waves bye-bye',
        }, headers=parent_headers)

        assert response.status_code == 201
        assert response.json()['data']['status'] == 'Not Started'
        assert response.json()['data']['assessedBy'] == parent.id

    @pytest.mark.asyncio
    async def test_other_parent_forbidden(self, client: AsyncClient, child, other_parent_headers):
        response = await client.post('/api/milestones', json={
            'childId': child.id, 'domain': 'Social', 'title': 'Waves bye-bye',
        }, headers=other_parent_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_deleted_child(self, client: AsyncClient, db_session, child, volunteer_headers):
        child.is_deleted = True
        await db_session.commit()

        response = await client.post('/api/milestones', json={
            'childId': child.id, 'domain': 'Motor', 'title': 'Walks',
        }, headers=volunteer_headers)

        assert response.status_code == 404


class TestMilestoneRetrieval:
    """Test listing and reading"""

    @pytest.mark.asyncio
    async def test_list_by_child_with_filters(self, client: AsyncClient, db_session, child, volunteer, parent_headers):
        motor = await add_milestone(db_session, child, volunteer, DevelopmentDomain.MOTOR)
        await add_milestone(db_session, child, volunteer, DevelopmentDomain.LANGUAGE)
        await add_milestone(db_session, child, volunteer, DevelopmentDomain.MOTOR,
                            status=MilestoneStatus.CONCERN, is_deleted=True)

        response = await client.get(f'/api/milestones/child/{child.id}', headers=parent_headers)
        assert response.json()['count'] == 2

        response = await client.get(f'/api/milestones/child/{child.id}?domain=Motor', headers=parent_headers)
        assert [m['id'] for m in response.json()['data']] == [motor.id]

        response = await client.get(
            f'/api/milestones/child/{child.id}?status=Concern', headers=parent_headers
        )
        assert response.json()['count'] == 0

    @pytest.mark.asyncio
    async def test_unassigned_volunteer_cannot_list(self, client: AsyncClient, child, other_volunteer_headers):
        response = await client.get(f'/api/milestones/child/{child.id}', headers=other_volunteer_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_get_single(self, client: AsyncClient, db_session, child, volunteer, parent_headers, other_parent_headers):
        milestone = await add_milestone(db_session, child, volunteer)

        response = await client.get(f'/api/milestones/{milestone.id}', headers=parent_headers)
        assert response.status_code == 200
        assert response.json()['data']['childId'] == child.id

        response = await client.get(f'/api/milestones/{milestone.id}', headers=other_parent_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_milestone(self, client: AsyncClient, admin_headers):
        response = await client.get('/api/milestones/missing', headers=admin_headers)

        assert response.status_code == 404


class TestMilestoneUpdate:
    """Test updates and the parent field restriction"""

    @pytest.mark.asyncio
    async def test_parent_can_only_touch_notes_media_activities(
        self, client: AsyncClient, db_session, child, volunteer, parent_headers
    ):
        milestone = await add_milestone(db_session, child, volunteer)

        response = await client.put(f'/api/milestones/{milestone.id}', json={
            'status': 'Achieved',
            'title': 'Renamed',
            'notes': 'Pulled up on the sofa today',
            'mediaURL': ['https://example.org/photo.jpg'],
        }, headers=parent_headers)

        assert response.status_code == 200
        data = response.json()['data']
        assert data['status'] == 'In Progress'
        assert data['title'] == 'Stands with support'
        assert data['notes'] == 'Pulled up on the sofa today'
        assert data['mediaURL'] == ['https://example.org/photo.jpg']

    @pytest.mark.asyncio
    async def test_parent_invalid_staff_field_ignored(
        self, client: AsyncClient, db_session, child, volunteer, parent_headers
    ):
        milestone = await add_milestone(db_session, child, volunteer)

        response = await client.put(f'/api/milestones/{milestone.id}', json={
            'status': 'Bogus',
            'notes': 'x',
        }, headers=parent_headers)

        assert response.status_code == 200
        data = response.json()['data']
        assert data['notes'] == 'x'
        assert data['status'] == 'In Progress'

    @pytest.mark.asyncio
    async def test_parent_invalid_media_rejected(self, client: AsyncClient, db_session, child, volunteer, parent_headers):
        milestone = await add_milestone(db_session, child, volunteer)

        response = await client.put(f'/api/milestones/{milestone.id}', json={
            'mediaURL': 'https://example.org/photo.jpg',
        }, headers=parent_headers)

        assert response.status_code == 400
        assert response.json()['message'].startswith('mediaURL')

    @pytest.mark.asyncio
    async def test_volunteer_invalid_status_rejected(
        self, client: AsyncClient, db_session, child, volunteer, volunteer_headers
    ):
        milestone = await add_milestone(db_session, child, volunteer)

        response = await client.put(f'/api/milestones/{milestone.id}', json={
            'status': 'Bogus',
            'notes': 'x',
        }, headers=volunteer_headers)

        assert response.status_code == 400
        assert response.json()['error'] == 'VALIDATION_ERROR'
        assert response.json()['message'].startswith('status')
        await db_session.refresh(milestone)
        assert milestone.notes is None

    @pytest.mark.asyncio
    async def test_volunteer_marks_achieved(self, client: AsyncClient, db_session, child, volunteer, volunteer_headers):
        milestone = await add_milestone(db_session, child, volunteer)

        missing_date = await client.put(f'/api/milestones/{milestone.id}', json={
            'status': 'Achieved',
        }, headers=volunteer_headers)
        assert missing_date.status_code == 400

        response = await client.put(f'/api/milestones/{milestone.id}', json={
            'status': 'Achieved',
            'achievedDate': '2024-06-01T09:30:00Z',
        }, headers=volunteer_headers)
        assert response.status_code == 200
        assert response.json()['data']['status'] == 'Achieved'
        assert response.json()['data']['achievedDate'].startswith('2024-06-01T09:30:00')

    @pytest.mark.asyncio
    async def test_activities_update(self, client: AsyncClient, db_session, child, volunteer, parent_headers):
        milestone = await add_milestone(db_session, child, volunteer)

        response = await client.put(f'/api/milestones/{milestone.id}', json={
            'activities': [{'title': 'Cruising along furniture', 'completed': True}],
        }, headers=parent_headers)

        activities = response.json()['data']['activities']
        assert activities[0]['title'] == 'Cruising along furniture'
        assert activities[0]['completed'] is True


class TestMilestoneDeletion:
    """Test soft delete"""

    @pytest.mark.asyncio
    async def test_volunteer_cannot_delete(self, client: AsyncClient, db_session, child, volunteer, volunteer_headers):
        milestone = await add_milestone(db_session, child, volunteer)

        response = await client.delete(f'/api/milestones/{milestone.id}', headers=volunteer_headers)

        assert response.status_code == 403
        await db_session.refresh(milestone)
        assert milestone.is_deleted is False

    @pytest.mark.asyncio
    async def test_admin_deletes(self, client: AsyncClient, db_session, child, volunteer, admin_headers):
        milestone = await add_milestone(db_session, child, volunteer)

        response = await client.delete(f'/api/milestones/{milestone.id}', headers=admin_headers)
        assert response.status_code == 200
        assert response.json()['message'] == 'Milestone deleted successfully'

        listing = await client.get(f'/api/milestones/child/{child.id}', headers=admin_headers)
        assert listing.json()['count'] == 0
