"""
Shared test doubles and helpers.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select

from auth_workflow.interfaces.notification_interface import INotificationDispatcher


class RecordingDispatcher(INotificationDispatcher):
    """Keeps every dispatched code instead of mailing it."""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.fail_with: Optional[Exception] = None

    async def dispatch(self, email: str, human_name: str, code: str) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({"email": email, "name": human_name, "code": code})
        return email

    def last_code(self, email: str) -> str:
        codes = [message["code"] for message in self.sent if message["email"] == email]
        assert codes, f"no code dispatched to {email}"
        return codes[-1]


async def count_rows(session_factory, model, **filters: Any) -> int:
    """Count rows of ``model`` matching equality filters."""
    query = select(func.count()).select_from(model)
    for column, value in filters.items():
        query = query.where(getattr(model, column) == value)
    async with session_factory() as session:
        result = await session.execute(query)
        return result.scalar_one()
