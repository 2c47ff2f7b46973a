"""
List Accounts Use Case
"""

from typing import Optional

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import CanonicalRole
from .dtos import AccountInfo, AccountListResponse


class ListAccountsUseCase:
    """Lists accounts; the role filter applies to the resolved role."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, role: Optional[CanonicalRole] = None, is_active: Optional[bool] = None
    ) -> Result[AccountListResponse]:
        async with self.uow:
            users = await self.uow.users.list(is_active=is_active)
            accounts = [AccountInfo.from_user(user) for user in users]

        if role is not None:
            accounts = [account for account in accounts if account.role == role]

        return Return.ok(AccountListResponse(accounts=accounts))
