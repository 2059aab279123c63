"""
Pending verification store

Persisted, expiring records for codes sent by email (signup verification,
password reset). One record per (email, purpose); issuing a new code replaces
the previous one.
"""

from datetime import timedelta
from typing import Any, Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.types import utcnow
from app.models.pending_verification import PendingVerification, VerificationPurpose


class VerificationStore:

    async def get(
        self,
        db: AsyncSession,
        email: str,
        purpose: VerificationPurpose
    ) -> Optional[PendingVerification]:
        result = await db.execute(
            select(PendingVerification).where(
                PendingVerification.email == email.lower(),
                PendingVerification.purpose == purpose,
            )
        )
        return result.scalar_one_or_none()

    async def put(
        self,
        db: AsyncSession,
        email: str,
        purpose: VerificationPurpose,
        code: str,
        ttl_minutes: int,
        payload: Optional[Dict[str, Any]] = None
    ) -> PendingVerification:
        """Insert or replace the record for (email, purpose)"""
        expires_at = utcnow() + timedelta(minutes=ttl_minutes)
        record = await self.get(db, email, purpose)
        if record is None:
            record = PendingVerification(email=email.lower(), purpose=purpose)
            db.add(record)
        record.code = code
        record.payload = payload or {}
        record.expires_at = expires_at
        record.created_at = utcnow()
        await db.flush()
        return record

    async def discard(self, db: AsyncSession, email: str, purpose: VerificationPurpose) -> None:
        await db.execute(
            delete(PendingVerification).where(
                PendingVerification.email == email.lower(),
                PendingVerification.purpose == purpose,
            )
        )

    async def purge_expired(self, db: AsyncSession) -> int:
        """Delete every expired record; returns the number removed"""
        result = await db.execute(
            delete(PendingVerification).where(PendingVerification.expires_at < utcnow())
        )
        return result.rowcount or 0


verification_store = VerificationStore()
