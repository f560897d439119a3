"""Member repository: registration, profile updates and refresh tokens."""
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel
from sqlalchemy import func, select, update

from models.member import Member
from models.schemas import MemberCreate, MemberUpdate
from models.transaction import BookStatus, Transaction
from repositories.base import Repository
from repositories.transaction_repository import TransactionRepository
from utils.auth_utils import hash_password, verify_refresh_token
from utils.errors import Unauthenticated

logger = logging.getLogger(__name__)


class MemberRepository(Repository):
    """Persistence of ``Member`` rows.

    Passwords arrive in plain text and are hashed here, before they reach
    the database.
    """

    model = Member
    create_schema = MemberCreate
    update_schema = MemberUpdate
    search_columns = ('name', 'phone_number', 'email')
    entity_name = 'Member'
    unique_message = 'A member with this email or phone number already exists'

    def _prepare_create(self, payload: BaseModel) -> Dict[str, Any]:
        values = payload.model_dump()
        values['password'] = hash_password(values['password'])
        return values

    def _prepare_update(self, current: Member, values: Dict[str, Any]) -> Dict[str, Any]:
        if 'password' in values:
            values['password'] = hash_password(values['password'])
        return values

    def _before_delete(self, entity: Member) -> None:
        # The loans cascade away with the member; their copies return to the shelf.
        book_ids = self.session.scalars(
            select(Transaction.book_id).where(
                Transaction.member_id == entity.id,
                Transaction.book_status == BookStatus.ISSUED.value,
            )
        ).all()
        loans = TransactionRepository()
        for book_id in book_ids:
            loans.restock(book_id)
        if book_ids:
            logger.info('Restocked %d copy(ies) held by member %s', len(book_ids), entity.id)

    def get_by_email(self, email: str) -> Optional[Member]:
        """Get member by email, ignoring case.

        Args:
            email: Email address to look up.

        Returns:
            The member if found, None otherwise.
        """
        if not email:
            return None
        return self.session.scalars(
            select(Member).where(func.lower(Member.email) == email.strip().lower())
        ).first()

    def update_token(self, member_id: int, refresh_token: str) -> Member:
        """Store a member's refresh token, replacing the previous one.

        Raises:
            NotFound: If the member does not exist.
        """
        with self._writing():
            result = self.session.execute(
                update(Member)
                .where(Member.id == member_id)
                .values({Member.refresh_token: refresh_token})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise self._not_found()
        return self.get_by_id(member_id)

    def clear_token(self, member_id: int) -> None:
        """Forget a member's refresh token (logout)."""
        with self._writing():
            self.session.execute(
                update(Member)
                .where(Member.id == member_id)
                .values({Member.refresh_token: None})
                .execution_options(synchronize_session=False)
            )

    def clear_expired_tokens(self) -> int:
        """Null out stored refresh tokens that no longer verify.

        Returns:
            Number of tokens cleared.
        """
        rows = self.session.execute(
            select(Member.id, Member.refresh_token).where(Member.refresh_token.is_not(None))
        ).all()

        stale_ids = []
        for member_id, token in rows:
            try:
                verify_refresh_token(token)
            except Unauthenticated:
                stale_ids.append(member_id)

        if not stale_ids:
            return 0

        with self._writing():
            self.session.execute(
                update(Member)
                .where(Member.id.in_(stale_ids))
                .values({Member.refresh_token: None})
                .execution_options(synchronize_session=False)
            )
        logger.info('Cleared %d expired refresh token(s)', len(stale_ids))
        return len(stale_ids)
