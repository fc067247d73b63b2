"""Account administration — commands an administrator runs on other accounts."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import ForbiddenError
from storefront.identity.account import _UNSET, Account
from storefront.utils.lookup import fetch

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Account")
class UpdateAccount:
    account_id: Identifier(required=True)
    updated_by: Identifier(required=True)
    full_name: String(max_length=100, sanitize=False)
    email: String(max_length=254)
    role: String(max_length=20)


@storefront.command(part_of="Account")
class RemoveAccount:
    account_id: Identifier(required=True)
    removed_by: Identifier(required=True)


@storefront.command_handler(part_of=Account)
class AccountAdministrationHandler:
    @handle(UpdateAccount)
    def update_account(self, command):
        repo = current_domain.repository_for(Account)
        if not repo.is_admin(command.updated_by):
            raise ForbiddenError({"_entity": ["Only administrators can edit other accounts"]})

        account = fetch(Account, command.account_id)
        if command.email:
            holder = repo.find_by_email(command.email)
            if holder is not None and str(holder.id) != str(account.id):
                raise ValidationError({"email": ["An account with this email already exists"]})

        # Blank values keep the current ones
        account.amend(
            command.updated_by,
            full_name=command.full_name or _UNSET,
            email=command.email or _UNSET,
            role=command.role or _UNSET,
        )
        repo.add(account)

    @handle(RemoveAccount)
    def remove_account(self, command):
        repo = current_domain.repository_for(Account)
        if not repo.is_admin(command.removed_by):
            raise ForbiddenError({"_entity": ["Only administrators can remove accounts"]})
        if str(command.account_id) == str(command.removed_by):
            raise ValidationError({"account_id": ["Administrators cannot remove their own account"]})

        account = fetch(Account, command.account_id)
        repo._dao.delete(account)
        logger.info("Account removed", account_id=str(account.id), removed_by=str(command.removed_by))
