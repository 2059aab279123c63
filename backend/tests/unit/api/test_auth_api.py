"""
Unit Tests for Authentication API Endpoints
"""
import pytest
from datetime import timedelta
from unittest.mock import AsyncMock
from httpx import AsyncClient
from faker import Faker

from app.core.exceptions import EmailDeliveryError
from app.core.types import utcnow
from app.models import UserStatus, VerificationPurpose
from app.services.email_service import email_service
from app.services.verification_store import verification_store

fake = Faker()


@pytest.fixture
def sent_codes(monkeypatch):
    """Capture outgoing verification and reset codes instead of emailing them"""
    signup = AsyncMock()
    reset = AsyncMock()
    monkeypatch.setattr(email_service, "send_verification_code", signup)
    monkeypatch.setattr(email_service, "send_password_reset_code", reset)
    return {"signup": signup, "reset": reset}


def _signup_data(**overrides):
    data = {
        'name': fake.name(),
        'username': f"student{fake.random_int(1000, 9999)}",
        'email': fake.unique.email(),
        'password': 'securePassword123',
    }
    data.update(overrides)
    return data


class TestSignup:
    """Two-step signup: emailed code, then account creation"""

    @pytest.mark.asyncio
    async def test_send_code_then_verify(self, client: AsyncClient, sent_codes):
        data = _signup_data()

        response = await client.post('/api/v1/auth/send-verification-code', json=data)
        assert response.status_code == 200
        assert response.json()['message'] == 'Verification code sent successfully'

        email, code = sent_codes['signup'].await_args.args
        assert email == data['email'].lower()

        response = await client.post('/api/v1/auth/verify-code', json={'email': data['email'], 'code': code})

        assert response.status_code == 200
        body = response.json()
        assert body['token']
        assert body['user']['username'] == data['username']
        assert body['user']['role'] == 'student'
        assert body['user']['is_verified'] is True
        assert 'hashed_password' not in body['user']

    @pytest.mark.asyncio
    async def test_wrong_code_rejected(self, client: AsyncClient, sent_codes):
        data = _signup_data()
        await client.post('/api/v1/auth/send-verification-code', json=data)
        code = sent_codes['signup'].await_args.args[1]
        wrong = '000000' if code != '000000' else '111111'

        response = await client.post('/api/v1/auth/verify-code', json={'email': data['email'], 'code': wrong})

        assert response.status_code == 400
        assert response.json()['error'] == 'INVALID_VERIFICATION_CODE'

    @pytest.mark.asyncio
    async def test_expired_code_rejected(self, client: AsyncClient, db_session, sent_codes):
        data = _signup_data()
        await client.post('/api/v1/auth/send-verification-code', json=data)
        code = sent_codes['signup'].await_args.args[1]

        record = await verification_store.get(db_session, data['email'], VerificationPurpose.signup)
        record.expires_at = utcnow() - timedelta(minutes=1)
        await db_session.commit()

        response = await client.post('/api/v1/auth/verify-code', json={'email': data['email'], 'code': code})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_code_is_single_use(self, client: AsyncClient, sent_codes):
        data = _signup_data()
        await client.post('/api/v1/auth/send-verification-code', json=data)
        code = sent_codes['signup'].await_args.args[1]
        payload = {'email': data['email'], 'code': code}

        first = await client.post('/api/v1/auth/verify-code', json=payload)
        second = await client.post('/api/v1/auth/verify-code', json=payload)

        assert first.status_code == 200
        assert second.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_email_refused(self, client: AsyncClient, test_user, sent_codes):
        response = await client.post(
            '/api/v1/auth/send-verification-code',
            json=_signup_data(email=test_user.email)
        )

        assert response.status_code == 400
        assert response.json()['error'] == 'EMAIL_OR_USERNAME_EXISTS'
        sent_codes['signup'].assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_email_is_validation_error(self, client: AsyncClient, sent_codes):
        response = await client.post(
            '/api/v1/auth/send-verification-code',
            json=_signup_data(email='not-an-email')
        )

        assert response.status_code == 400
        body = response.json()
        assert body['error'] == 'VALIDATION_ERROR'
        assert body['message'].startswith('email')

    @pytest.mark.asyncio
    async def test_delivery_failure_surfaces(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(
            email_service, "send_verification_code", AsyncMock(side_effect=EmailDeliveryError())
        )

        response = await client.post('/api/v1/auth/send-verification-code', json=_signup_data())

        assert response.status_code == 500
        assert response.json()['error'] == 'EMAIL_DELIVERY_FAILED'


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, test_user):
        response = await client.post('/api/v1/auth/login', json={
            'email': test_user.email.upper(),
            'password': 'testpassword123'
        })

        assert response.status_code == 200
        body = response.json()
        assert body['message'] == 'Login successful'
        assert body['token_type'] == 'bearer'
        assert body['user']['id'] == test_user.id

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, test_user):
        response = await client.post('/api/v1/auth/login', json={
            'email': test_user.email,
            'password': 'wrongpassword'
        })

        assert response.status_code == 401
        assert response.json()['error'] == 'INVALID_CREDENTIALS'

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post('/api/v1/auth/login', json={
            'email': fake.email(),
            'password': 'whatever123'
        })

        assert response.status_code == 401
        assert response.json()['error'] == 'INVALID_CREDENTIALS'

    @pytest.mark.asyncio
    async def test_suspended_user_refused(self, client: AsyncClient, user_factory):
        user = await user_factory(status=UserStatus.suspended)

        response = await client.post('/api/v1/auth/login', json={
            'email': user.email,
            'password': 'testpassword123'
        })

        assert response.status_code == 403
        assert response.json()['error'] == 'ACCOUNT_INACTIVE'


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, test_user, auth_headers):
        response = await client.get('/api/v1/auth/me', headers=auth_headers)

        assert response.status_code == 200
        assert response.json()['email'] == test_user.email

    @pytest.mark.asyncio
    async def test_me_without_token(self, client: AsyncClient):
        response = await client.get('/api/v1/auth/me')

        assert response.status_code == 401
        assert response.json()['error'] == 'NO_TOKEN'

    @pytest.mark.asyncio
    async def test_me_with_garbage_token(self, client: AsyncClient):
        response = await client.get('/api/v1/auth/me', headers={'Authorization': 'Bearer nope'})

        assert response.status_code == 401
        assert response.json()['error'] == 'INVALID_TOKEN'

    @pytest.mark.asyncio
    async def test_banned_user_token_refused(self, client: AsyncClient, user_factory, token_for):
        user = await user_factory(status=UserStatus.banned)

        response = await client.get('/api/v1/auth/me', headers=token_for(user))

        assert response.status_code == 403


class TestPasswordReset:

    @pytest.mark.asyncio
    async def test_unknown_email_gets_same_answer(self, client: AsyncClient, sent_codes):
        response = await client.post('/api/v1/auth/forgot-password', json={'email': fake.email()})

        assert response.status_code == 200
        assert response.json()['message'] == 'If this email exists, a reset code has been sent'
        sent_codes['reset'].assert_not_awaited()

    @pytest.mark.asyncio
    async def test_full_reset_flow(self, client: AsyncClient, test_user, sent_codes):
        await client.post('/api/v1/auth/forgot-password', json={'email': test_user.email})
        code = sent_codes['reset'].await_args.args[1]

        response = await client.post('/api/v1/auth/verify-reset-code', json={
            'email': test_user.email, 'code': code
        })
        assert response.status_code == 200
        token = response.json()['token']

        response = await client.post('/api/v1/auth/reset-password', json={
            'token': token, 'new_password': 'brandNewPass1'
        })
        assert response.status_code == 200

        login = await client.post('/api/v1/auth/login', json={
            'email': test_user.email, 'password': 'brandNewPass1'
        })
        assert login.status_code == 200

        # Reset tokens work once
        reused = await client.post('/api/v1/auth/reset-password', json={
            'token': token, 'new_password': 'anotherPass1'
        })
        assert reused.status_code == 401

    @pytest.mark.asyncio
    async def test_expired_reset_code(self, client: AsyncClient, db_session, test_user, sent_codes):
        await client.post('/api/v1/auth/forgot-password', json={'email': test_user.email})
        code = sent_codes['reset'].await_args.args[1]
        record = await verification_store.get(db_session, test_user.email, VerificationPurpose.password_reset)
        record.expires_at = utcnow() - timedelta(minutes=1)
        await db_session.commit()

        response = await client.post('/api/v1/auth/verify-reset-code', json={
            'email': test_user.email, 'code': code
        })

        assert response.status_code == 400
        assert response.json()['error'] == 'EXPIRED_CODE'

    @pytest.mark.asyncio
    async def test_verify_without_request(self, client: AsyncClient, test_user):
        response = await client.post('/api/v1/auth/verify-reset-code', json={
            'email': test_user.email, 'code': '123456'
        })

        assert response.status_code == 400
        assert response.json()['error'] == 'NO_REQUEST_FOUND'

    @pytest.mark.asyncio
    async def test_access_token_cannot_reset_password(self, client: AsyncClient, auth_headers):
        token = auth_headers['Authorization'].split()[1]

        response = await client.post('/api/v1/auth/reset-password', json={
            'token': token, 'new_password': 'brandNewPass1'
        })

        assert response.status_code == 401
        assert response.json()['error'] == 'INVALID_TOKEN'
