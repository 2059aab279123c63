"""
Integration Tests for catalog + review flows over the HTTP API
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from app.core.config import settings
from app.models import Review


async def _build_catalog(client: AsyncClient, admin_headers: dict) -> dict:
    response = await client.post('/api/v1/departments', headers=admin_headers, json={
        'code': 'CS', 'name': 'Computer Science', 'faculty': 'Arts and Sciences'
    })
    assert response.status_code == 201
    department = response.json()['department']

    response = await client.post('/api/v1/courses', headers=admin_headers, json={
        'department': department['id'], 'course_number': '101', 'name': 'Intro', 'credit_hours': 3
    })
    assert response.status_code == 201
    course = response.json()['course']

    response = await client.post('/api/v1/professors', headers=admin_headers, json={
        'name': 'A', 'departments': [department['id']]
    })
    assert response.status_code == 201
    professor = response.json()['professor']

    return {'department': department, 'course': course, 'professor': professor}


class TestProfessorRatingFlow:

    @pytest.mark.asyncio
    async def test_average_follows_approved_reviews(
        self, client: AsyncClient, monkeypatch, auth_headers, admin_auth_headers
    ):
        """Approved reviews of 4 then 2 give averages of 4.0 then 3.0"""
        monkeypatch.setattr(settings, 'REVIEW_DEFAULT_STATUS', 'approved')
        catalog = await _build_catalog(client, admin_auth_headers)
        professor_id = catalog['professor']['id']

        for rating, expected in ((4, 4.0), (2, 3.0)):
            response = await client.post('/api/v1/reviews', headers=auth_headers, json={
                'type': 'professor', 'professor': professor_id, 'rating': rating, 'review_text': 'Noted',
            })
            assert response.status_code == 201
            assert response.json()['review']['status'] == 'approved'

            response = await client.get(f'/api/v1/professors/{professor_id}')
            assert response.json()['avg_rating'] == expected

        response = await client.get(f'/api/v1/reviews/professor/{professor_id}')
        assert response.json()['pagination']['total'] == 2

    @pytest.mark.asyncio
    async def test_pending_flow_needs_approval(self, client: AsyncClient, auth_headers, admin_auth_headers):
        catalog = await _build_catalog(client, admin_auth_headers)
        professor_id = catalog['professor']['id']

        response = await client.post('/api/v1/reviews', headers=auth_headers, json={
            'type': 'professor', 'professor': professor_id, 'rating': 5, 'review_text': 'Brilliant',
        })
        review_id = response.json()['review']['id']

        response = await client.get(f'/api/v1/professors/{professor_id}')
        assert response.json()['avg_rating'] == 0

        await client.patch(f'/api/v1/admin/reviews/{review_id}/approve', headers=admin_auth_headers)
        response = await client.get(f'/api/v1/professors/{professor_id}')
        assert response.json()['avg_rating'] == 5.0

        await client.patch(f'/api/v1/admin/reviews/{review_id}/reject', headers=admin_auth_headers)
        response = await client.get(f'/api/v1/professors/{professor_id}')
        assert response.json()['avg_rating'] == 0


class TestContentRejection:

    @pytest.mark.asyncio
    async def test_denylisted_substring_not_persisted(
        self, client: AsyncClient, db_session, auth_headers, admin_auth_headers
    ):
        catalog = await _build_catalog(client, admin_auth_headers)

        response = await client.post('/api/v1/reviews', headers=auth_headers, json={
            'type': 'course',
            'course': catalog['course']['id'],
            'department': catalog['department']['id'],
            'rating': 1,
            'review_text': 'The grading was bullshitty at best',
        })

        assert response.status_code == 400
        assert response.json()['error'] == 'INAPPROPRIATE_CONTENT'
        assert await db_session.scalar(select(func.count(Review.id))) == 0


class TestDuplicateReport:

    @pytest.mark.asyncio
    async def test_second_report_rejected(
        self, client: AsyncClient, monkeypatch, auth_headers, other_auth_headers, admin_auth_headers
    ):
        monkeypatch.setattr(settings, 'REVIEW_DEFAULT_STATUS', 'approved')
        catalog = await _build_catalog(client, admin_auth_headers)
        response = await client.post('/api/v1/reviews', headers=auth_headers, json={
            'type': 'professor', 'professor': catalog['professor']['id'], 'rating': 3, 'review_text': 'Fine',
        })
        review_id = response.json()['review']['id']

        first = await client.post(f'/api/v1/reviews/{review_id}/report', headers=other_auth_headers,
                                  json={'reason': 'Spam'})
        second = await client.post(f'/api/v1/reviews/{review_id}/report', headers=other_auth_headers,
                                   json={'reason': 'Spam'})

        assert first.json()['report_count'] == 1
        assert second.status_code == 400

        response = await client.get(f'/api/v1/reviews/{review_id}', headers=admin_auth_headers)
        assert response.json()['report_count'] == 1


class TestDepartmentDeletionGuard:

    @pytest.mark.asyncio
    async def test_department_with_courses_survives_delete(self, client: AsyncClient, admin_auth_headers):
        catalog = await _build_catalog(client, admin_auth_headers)
        department_id = catalog['department']['id']

        response = await client.delete(f'/api/v1/departments/{department_id}', headers=admin_auth_headers)
        assert response.status_code == 400
        assert response.json()['error'] == 'DEPARTMENT_HAS_COURSES'

        response = await client.get(f'/api/v1/departments/{department_id}')
        assert response.status_code == 200
