"""
Unit Tests for the pending verification store
"""
import pytest
from datetime import timedelta

from app.core.types import utcnow
from app.models import VerificationPurpose
from app.services.verification_store import verification_store


class TestVerificationStore:

    @pytest.mark.asyncio
    async def test_put_then_get(self, db_session):
        await verification_store.put(
            db_session, "Student@Uni.edu", VerificationPurpose.signup, "123456",
            ttl_minutes=10, payload={"username": "student"}
        )

        record = await verification_store.get(db_session, "student@uni.edu", VerificationPurpose.signup)

        assert record is not None
        assert record.email == "student@uni.edu"
        assert record.code == "123456"
        assert record.payload == {"username": "student"}
        assert not record.is_expired(utcnow())

    @pytest.mark.asyncio
    async def test_new_code_replaces_old(self, db_session):
        await verification_store.put(db_session, "a@uni.edu", VerificationPurpose.signup, "111111", ttl_minutes=10)
        await verification_store.put(db_session, "a@uni.edu", VerificationPurpose.signup, "222222", ttl_minutes=10)

        record = await verification_store.get(db_session, "a@uni.edu", VerificationPurpose.signup)

        assert record.code == "222222"

    @pytest.mark.asyncio
    async def test_purposes_are_separate(self, db_session):
        await verification_store.put(db_session, "a@uni.edu", VerificationPurpose.signup, "111111", ttl_minutes=10)

        assert await verification_store.get(db_session, "a@uni.edu", VerificationPurpose.password_reset) is None

    @pytest.mark.asyncio
    async def test_expiry(self, db_session):
        record = await verification_store.put(
            db_session, "a@uni.edu", VerificationPurpose.password_reset, "111111", ttl_minutes=10
        )

        assert record.is_expired(utcnow() + timedelta(minutes=11))

    @pytest.mark.asyncio
    async def test_discard_and_purge(self, db_session):
        await verification_store.put(db_session, "a@uni.edu", VerificationPurpose.signup, "111111", ttl_minutes=10)
        await verification_store.put(db_session, "b@uni.edu", VerificationPurpose.signup, "222222", ttl_minutes=-1)

        removed = await verification_store.purge_expired(db_session)
        assert removed == 1

        await verification_store.discard(db_session, "a@uni.edu", VerificationPurpose.signup)
        assert await verification_store.get(db_session, "a@uni.edu", VerificationPurpose.signup) is None
