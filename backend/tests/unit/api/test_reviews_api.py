"""
Unit Tests for Review API Endpoints
"""
import pytest
from httpx import AsyncClient


def _professor_review(professor, **overrides):
    data = {
        'type': 'professor',
        'professor': professor.id,
        'rating': 4,
        'review_text': 'Clear and well paced lectures',
    }
    data.update(overrides)
    return data


def _course_review(course, department, **overrides):
    data = {
        'type': 'course',
        'course': course.id,
        'department': department.id,
        'rating': 3,
        'review_text': 'Fair amount of homework',
    }
    data.update(overrides)
    return data


async def _submit(client, headers, payload) -> dict:
    response = await client.post('/api/v1/reviews', headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()['review']


async def _approve(client, admin_headers, review_id) -> dict:
    response = await client.patch(f'/api/v1/admin/reviews/{review_id}/approve', headers=admin_headers)
    assert response.status_code == 200, response.text
    return response.json()['review']


class TestCreateReview:

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient, professor):
        response = await client.post('/api/v1/reviews', json=_professor_review(professor))

        assert response.status_code == 401
        assert response.json()['error'] == 'NO_TOKEN'

    @pytest.mark.asyncio
    async def test_create_professor_review(self, client: AsyncClient, test_user, auth_headers, professor):
        review = await _submit(client, auth_headers, _professor_review(professor))

        assert review['status'] == 'pending'
        assert review['title'] == 'Jane Doe'
        assert review['username'] == test_user.username
        assert review['professor']['id'] == professor.id
        assert review['course'] is None

    @pytest.mark.asyncio
    async def test_create_course_review(self, client: AsyncClient, auth_headers, course, department):
        review = await _submit(client, auth_headers, _course_review(course, department))

        assert review['type'] == 'course'
        assert review['title'] == 'CS 101: Intro to Programming'
        assert review['department']['code'] == 'CS'

    @pytest.mark.asyncio
    async def test_missing_variant_field(self, client: AsyncClient, auth_headers, course):
        payload = {'type': 'course', 'course': course.id, 'rating': 3, 'review_text': 'ok'}

        response = await client.post('/api/v1/reviews', headers=auth_headers, json=payload)

        assert response.status_code == 400
        assert response.json()['error'] == 'VALIDATION_ERROR'

    @pytest.mark.asyncio
    async def test_bad_rating(self, client: AsyncClient, auth_headers, professor):
        response = await client.post(
            '/api/v1/reviews', headers=auth_headers, json=_professor_review(professor, rating=9)
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_inappropriate_content(self, client: AsyncClient, auth_headers, professor):
        response = await client.post(
            '/api/v1/reviews', headers=auth_headers,
            json=_professor_review(professor, review_text='Total shit lecturer')
        )

        assert response.status_code == 400
        assert response.json()['error'] == 'INAPPROPRIATE_CONTENT'


class TestVisibility:
    """Pending reviews are visible to their author and admins only"""

    @pytest.mark.asyncio
    async def test_pending_hidden_from_public(self, client: AsyncClient, auth_headers, professor):
        review = await _submit(client, auth_headers, _professor_review(professor))

        response = await client.get(f'/api/v1/reviews/{review["id"]}')
        assert response.status_code == 404

        response = await client.get('/api/v1/reviews')
        assert response.json()['items'] == []

    @pytest.mark.asyncio
    async def test_pending_visible_to_author(self, client: AsyncClient, auth_headers, professor):
        review = await _submit(client, auth_headers, _professor_review(professor))

        response = await client.get(f'/api/v1/reviews/{review["id"]}', headers=auth_headers)

        assert response.status_code == 200
        assert response.json()['status'] == 'pending'

    @pytest.mark.asyncio
    async def test_pending_hidden_from_other_students(
        self, client: AsyncClient, auth_headers, other_auth_headers, professor
    ):
        review = await _submit(client, auth_headers, _professor_review(professor))

        response = await client.get(f'/api/v1/reviews/{review["id"]}', headers=other_auth_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_anonymous_review_hides_username_publicly(
        self, client: AsyncClient, auth_headers, admin_auth_headers, professor
    ):
        review = await _submit(client, auth_headers, _professor_review(professor, is_anonymous=True))
        await _approve(client, admin_auth_headers, review['id'])

        response = await client.get(f'/api/v1/reviews/{review["id"]}')

        body = response.json()
        assert body['display_name'] == 'Anonymous'
        assert 'username' not in body
        assert 'user_id' not in body

    @pytest.mark.asyncio
    async def test_listing_filters_by_type(
        self, client: AsyncClient, auth_headers, admin_auth_headers, professor, course, department
    ):
        first = await _submit(client, auth_headers, _professor_review(professor))
        second = await _submit(client, auth_headers, _course_review(course, department))
        await _approve(client, admin_auth_headers, first['id'])
        await _approve(client, admin_auth_headers, second['id'])

        response = await client.get('/api/v1/reviews', params={'type': 'course'})

        assert [r['id'] for r in response.json()['items']] == [second['id']]

    @pytest.mark.asyncio
    async def test_my_reviews_include_pending(self, client: AsyncClient, auth_headers, professor):
        review = await _submit(client, auth_headers, _professor_review(professor))

        response = await client.get('/api/v1/reviews/user', headers=auth_headers)

        assert [r['id'] for r in response.json()] == [review['id']]


class TestEditDelete:

    @pytest.mark.asyncio
    async def test_author_edits(self, client: AsyncClient, auth_headers, professor):
        review = await _submit(client, auth_headers, _professor_review(professor))

        response = await client.put(
            f'/api/v1/reviews/{review["id"]}', headers=auth_headers,
            json=_professor_review(professor, rating=2, title='Changed my mind')
        )

        assert response.status_code == 200
        edited = response.json()['review']
        assert edited['rating'] == 2
        assert edited['title'] == 'Changed my mind'

    @pytest.mark.asyncio
    async def test_other_user_cannot_edit(self, client: AsyncClient, auth_headers, other_auth_headers, professor):
        review = await _submit(client, auth_headers, _professor_review(professor))

        response = await client.put(
            f'/api/v1/reviews/{review["id"]}', headers=other_auth_headers, json=_professor_review(professor)
        )

        assert response.status_code == 403
        assert response.json()['error'] == 'NOT_REVIEW_OWNER'

    @pytest.mark.asyncio
    async def test_delete_with_wrong_username(self, client: AsyncClient, auth_headers, professor):
        review = await _submit(client, auth_headers, _professor_review(professor))

        response = await client.delete(
            f'/api/v1/reviews/{review["id"]}', headers=auth_headers, params={'username': 'impostor'}
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_author_deletes(self, client: AsyncClient, test_user, auth_headers, professor):
        review = await _submit(client, auth_headers, _professor_review(professor))

        response = await client.delete(
            f'/api/v1/reviews/{review["id"]}', headers=auth_headers, params={'username': test_user.username}
        )
        assert response.status_code == 200

        response = await client.get(f'/api/v1/reviews/{review["id"]}', headers=auth_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_review(self, client: AsyncClient, auth_headers):
        response = await client.delete('/api/v1/reviews/does-not-exist', headers=auth_headers)

        assert response.status_code == 404
        assert response.json()['error'] == 'REVIEW_NOT_FOUND'


class TestVotesAndReports:

    @pytest.mark.asyncio
    async def test_vote_toggle(
        self, client: AsyncClient, auth_headers, other_auth_headers, admin_auth_headers, professor
    ):
        review = await _submit(client, auth_headers, _professor_review(professor))
        await _approve(client, admin_auth_headers, review['id'])
        url = f'/api/v1/reviews/{review["id"]}'

        response = await client.post(f'{url}/upvote', headers=other_auth_headers)
        assert response.json() == {'message': 'Vote recorded', 'upvotes': 1, 'downvotes': 0, 'user_vote': 'up'}

        response = await client.post(f'{url}/downvote', headers=other_auth_headers)
        assert response.json()['upvotes'] == 0
        assert response.json()['downvotes'] == 1
        assert response.json()['user_vote'] == 'down'

        response = await client.post(f'{url}/downvote', headers=other_auth_headers)
        assert response.json()['downvotes'] == 0
        assert response.json()['user_vote'] is None

    @pytest.mark.asyncio
    async def test_report_once(
        self, client: AsyncClient, auth_headers, other_auth_headers, admin_auth_headers, professor
    ):
        review = await _submit(client, auth_headers, _professor_review(professor))
        await _approve(client, admin_auth_headers, review['id'])
        url = f'/api/v1/reviews/{review["id"]}/report'

        response = await client.post(url, headers=other_auth_headers, json={'reason': 'Spam'})
        assert response.status_code == 200
        assert response.json()['report_count'] == 1

        response = await client.post(url, headers=other_auth_headers, json={'reason': 'Spam'})
        assert response.status_code == 400
        assert response.json()['error'] == 'ALREADY_REPORTED'

    @pytest.mark.asyncio
    async def test_reported_list_is_admin_only(self, client: AsyncClient, auth_headers):
        response = await client.get('/api/v1/reviews/reported', headers=auth_headers)

        assert response.status_code == 403
