"""
사용자 서비스

프로필 조회/수정 (full_name, currency, timezone, avatar_url)
"""

import logging
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import UserNotFound, ValidationError
from core.ledger.validation import normalize_currency, validate_timezone

logger = logging.getLogger(__name__)


class UserService:
    """사용자 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def get_profile(self, user_id: int) -> dict[str, Any]:
        """사용자 조회 (비밀번호 해시 제외)

        Raises:
            UserNotFound
        """
        row = await self.db.fetchone_dict(
            """
            SELECT id, username, email, full_name, currency, timezone,
                   avatar_url, created_at, updated_at
            FROM users WHERE id = ?
            """,
            (user_id,),
        )
        if row is None:
            raise UserNotFound()
        return row

    async def update_profile(
        self,
        user_id: int,
        full_name: str | None = None,
        currency: str | None = None,
        timezone: str | None = None,
        avatar_url: str | None = None,
    ) -> dict[str, Any]:
        """프로필 수정 (지정된 필드만)

        Raises:
            ValidationError: 변경할 필드가 없거나 형식 오류
        """
        updates: dict[str, Any] = {}
        if full_name is not None:
            updates["full_name"] = full_name.strip()
        if currency is not None:
            updates["currency"] = normalize_currency(currency)
        if timezone is not None:
            updates["timezone"] = validate_timezone(timezone)
        if avatar_url is not None:
            updates["avatar_url"] = avatar_url.strip() or None

        if not updates:
            raise ValidationError("No fields to update")

        assignments = ", ".join(f"{column} = ?" for column in updates)
        await self.db.execute(
            f"UPDATE users SET {assignments}, updated_at = datetime('now') WHERE id = ?",
            (*updates.values(), user_id),
        )
        await self.db.commit()

        logger.info("프로필 수정", extra={"user_id": user_id, "fields": list(updates)})
        return await self.get_profile(user_id)
