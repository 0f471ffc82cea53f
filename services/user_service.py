"""
User Service
Business logic for user identity lookups
"""

import logging
from typing import Optional
from sqlalchemy.orm import Session

from database import get_db_context
import models


logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user-related operations
    """

    async def create_user(
        self,
        name: str,
        email: str,
        timezone: str = "UTC",
        db: Optional[Session] = None
    ) -> models.User:
        """
        Create a new user

        Args:
            name: Display name
            email: Email address (unique)
            timezone: User's timezone
            db: Database session (optional)

        Returns:
            Created User object
        """
        def _create(session: Session) -> models.User:
            existing = session.query(models.User).filter(
                models.User.email == email
            ).first()

            if existing:
                raise ValueError(f"User with email {email} already exists")

            user = models.User(name=name, email=email, timezone=timezone)

            session.add(user)
            session.commit()
            session.refresh(user)

            logger.info(f"Created user {user.id}")
            return user

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def get_user(
        self,
        user_id: Optional[int],
        db: Optional[Session] = None
    ) -> Optional[models.User]:
        """Get an active user by ID, None when missing or inactive"""
        def _get(session: Session) -> Optional[models.User]:
            if user_id is None:
                return None
            return session.query(models.User).filter(
                models.User.id == user_id,
                models.User.is_active == True  # noqa: E712
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
user_service = UserService()
