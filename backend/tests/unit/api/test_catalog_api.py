"""
Unit Tests for Department, Course and Professor API Endpoints
"""
import pytest
from httpx import AsyncClient

from app.models import Department, Professor, Review, ReviewStatus, ReviewType


async def _approved_course_review(db_session, user, course) -> Review:
    review = Review(
        type=ReviewType.course,
        title=f"{course.department.code} {course.course_number}: {course.name}",
        rating=4,
        review_text="Good course",
        user_id=user.id,
        username=user.username,
        display_name=user.username,
        status=ReviewStatus.approved,
        course=course,
        department=course.department,
    )
    db_session.add(review)
    await db_session.commit()
    return review


class TestDepartments:

    @pytest.mark.asyncio
    async def test_list_is_public(self, client: AsyncClient, department):
        response = await client.get('/api/v1/departments')

        assert response.status_code == 200
        assert [d['code'] for d in response.json()] == ['CS']

    @pytest.mark.asyncio
    async def test_create_requires_admin(self, client: AsyncClient, auth_headers):
        response = await client.post('/api/v1/departments', headers=auth_headers, json={
            'name': 'Physics', 'code': 'PHYS', 'faculty': 'Arts and Sciences'
        })

        assert response.status_code == 403
        assert response.json()['error'] == 'NOT_ADMIN'

    @pytest.mark.asyncio
    async def test_admin_creates_department(self, client: AsyncClient, admin_auth_headers):
        response = await client.post('/api/v1/departments', headers=admin_auth_headers, json={
            'name': 'Physics', 'code': 'phys', 'faculty': 'Arts and Sciences'
        })

        assert response.status_code == 201
        assert response.json()['department']['code'] == 'PHYS'

    @pytest.mark.asyncio
    async def test_duplicate_code_conflicts(self, client: AsyncClient, admin_auth_headers, department):
        response = await client.post('/api/v1/departments', headers=admin_auth_headers, json={
            'name': 'Computing', 'code': 'cs', 'faculty': 'Engineering'
        })

        assert response.status_code == 400
        assert response.json()['error'] == 'DEPARTMENT_EXISTS'

    @pytest.mark.asyncio
    async def test_delete_blocked_while_courses_exist(self, client: AsyncClient, admin_auth_headers, department, course):
        response = await client.delete(f'/api/v1/departments/{department.id}', headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()['error'] == 'DEPARTMENT_HAS_COURSES'

    @pytest.mark.asyncio
    async def test_delete_blocked_for_sole_department_professor(
        self, client: AsyncClient, admin_auth_headers, db_session, department
    ):
        solo = Professor(name='Solo', title='Lecturer', avg_rating=0, departments=[department])
        db_session.add(solo)
        await db_session.commit()

        response = await client.delete(f'/api/v1/departments/{department.id}', headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()['error'] == 'DEPARTMENT_HAS_PROFESSORS'
        response = await client.get(f'/api/v1/professors/{solo.id}')
        assert [d['id'] for d in response.json()['departments']] == [department.id]

    @pytest.mark.asyncio
    async def test_delete_unlinks_professor_with_other_departments(
        self, client: AsyncClient, admin_auth_headers, db_session, department
    ):
        math = Department(name='Mathematics', code='MATH', description='', faculty='Arts and Sciences')
        shared = Professor(name='Shared', title='Professor', avg_rating=0, departments=[department, math])
        db_session.add_all([math, shared])
        await db_session.commit()

        response = await client.delete(f'/api/v1/departments/{department.id}', headers=admin_auth_headers)

        assert response.status_code == 200
        await db_session.refresh(shared, ['departments'])
        assert [d.code for d in shared.departments] == ['MATH']

    @pytest.mark.asyncio
    async def test_delete_empty_department(self, client: AsyncClient, admin_auth_headers, department):
        response = await client.delete(f'/api/v1/departments/{department.id}', headers=admin_auth_headers)
        assert response.status_code == 200

        response = await client.get(f'/api/v1/departments/{department.id}')
        assert response.status_code == 404
        assert response.json()['error'] == 'DEPARTMENT_NOT_FOUND'

    @pytest.mark.asyncio
    async def test_code_change_retitles_course_reviews(
        self, client: AsyncClient, db_session, admin_auth_headers, test_user, department, course
    ):
        review = await _approved_course_review(db_session, test_user, course)

        response = await client.put(f'/api/v1/departments/{department.id}', headers=admin_auth_headers, json={
            'code': 'CMPS'
        })
        assert response.status_code == 200

        response = await client.get(f'/api/v1/reviews/{review.id}')
        assert response.json()['title'] == 'CMPS 101: Intro to Programming'

    @pytest.mark.asyncio
    async def test_department_courses(self, client: AsyncClient, department, course):
        response = await client.get(f'/api/v1/departments/{department.id}/courses')

        assert response.status_code == 200
        assert [c['id'] for c in response.json()] == [course.id]


class TestCourses:

    @pytest.mark.asyncio
    async def test_admin_creates_course_with_normalized_number(
        self, client: AsyncClient, admin_auth_headers, department
    ):
        response = await client.post('/api/v1/courses', headers=admin_auth_headers, json={
            'course_number': '2 02', 'name': 'Data Structures', 'department': department.id, 'credit_hours': 3
        })

        assert response.status_code == 201
        course = response.json()['course']
        assert course['course_number'] == '202'
        assert course['department']['code'] == 'CS'

    @pytest.mark.asyncio
    async def test_duplicate_number_in_department_conflicts(
        self, client: AsyncClient, admin_auth_headers, department, course
    ):
        response = await client.post('/api/v1/courses', headers=admin_auth_headers, json={
            'course_number': '101', 'name': 'Other', 'department': department.id, 'credit_hours': 3
        })

        assert response.status_code == 400
        assert response.json()['error'] == 'COURSE_EXISTS'

    @pytest.mark.asyncio
    async def test_unknown_department(self, client: AsyncClient, admin_auth_headers):
        response = await client.post('/api/v1/courses', headers=admin_auth_headers, json={
            'course_number': '101', 'name': 'X', 'department': 'missing', 'credit_hours': 3
        })

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_filter_by_department(self, client: AsyncClient, department, course):
        response = await client.get('/api/v1/courses', params={'department': department.id})

        assert [c['id'] for c in response.json()] == [course.id]

    @pytest.mark.asyncio
    async def test_rename_retitles_reviews(
        self, client: AsyncClient, db_session, admin_auth_headers, test_user, course
    ):
        review = await _approved_course_review(db_session, test_user, course)

        response = await client.put(f'/api/v1/courses/{course.id}', headers=admin_auth_headers, json={
            'name': 'Programming I'
        })
        assert response.status_code == 200

        response = await client.get(f'/api/v1/reviews/{review.id}')
        assert response.json()['title'] == 'CS 101: Programming I'

    @pytest.mark.asyncio
    async def test_delete_blocked_by_reviews(
        self, client: AsyncClient, db_session, admin_auth_headers, test_user, course
    ):
        await _approved_course_review(db_session, test_user, course)

        response = await client.delete(f'/api/v1/courses/{course.id}', headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()['error'] == 'COURSE_HAS_REVIEWS'

    @pytest.mark.asyncio
    async def test_course_reviews_only_approved(
        self, client: AsyncClient, db_session, test_user, course
    ):
        approved = await _approved_course_review(db_session, test_user, course)
        hidden = await _approved_course_review(db_session, test_user, course)
        hidden.status = ReviewStatus.pending
        await db_session.commit()

        response = await client.get(f'/api/v1/courses/{course.id}/reviews')

        body = response.json()
        assert [r['id'] for r in body['items']] == [approved.id]
        assert body['pagination'] == {'total': 1, 'page': 1, 'limit': 10, 'pages': 1}


class TestProfessors:

    @pytest.mark.asyncio
    async def test_admin_creates_professor(self, client: AsyncClient, admin_auth_headers, department, course):
        response = await client.post('/api/v1/professors', headers=admin_auth_headers, json={
            'name': 'Alan Turing',
            'title': 'Professor',
            'departments': [department.id],
            'courses': [course.id],
            'email': 'Alan@University.edu',
        })

        assert response.status_code == 201
        professor = response.json()['professor']
        assert professor['avg_rating'] == 0
        assert professor['email'] == 'alan@university.edu'
        assert [d['code'] for d in professor['departments']] == ['CS']

    @pytest.mark.asyncio
    async def test_same_name_in_department_conflicts(self, client: AsyncClient, admin_auth_headers, professor, department):
        response = await client.post('/api/v1/professors', headers=admin_auth_headers, json={
            'name': 'jane doe',
            'departments': [department.id],
        })

        assert response.status_code == 400
        assert response.json()['error'] == 'PROFESSOR_EXISTS'

    @pytest.mark.asyncio
    async def test_requires_a_department(self, client: AsyncClient, admin_auth_headers):
        response = await client.post('/api/v1/professors', headers=admin_auth_headers, json={
            'name': 'Nobody',
            'departments': [],
        })

        assert response.status_code == 400
        assert response.json()['error'] == 'VALIDATION_ERROR'

    @pytest.mark.asyncio
    async def test_list_by_department(self, client: AsyncClient, professor, department):
        response = await client.get(f'/api/v1/professors/department/{department.id}')

        assert response.status_code == 200
        assert [p['id'] for p in response.json()] == [professor.id]

    @pytest.mark.asyncio
    async def test_delete_removes_reviews(
        self, client: AsyncClient, db_session, admin_auth_headers, test_user, professor
    ):
        db_session.add(Review(
            type=ReviewType.professor,
            title=professor.name,
            rating=5,
            review_text='Great',
            user_id=test_user.id,
            username=test_user.username,
            display_name=test_user.username,
            status=ReviewStatus.approved,
            professor=professor,
        ))
        await db_session.commit()

        response = await client.delete(f'/api/v1/professors/{professor.id}', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['deleted_reviews'] == 1

        response = await client.get(f'/api/v1/professors/{professor.id}')
        assert response.status_code == 404
