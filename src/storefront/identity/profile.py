"""Account profile updates and admin promotion — commands and handlers."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import ForbiddenError
from storefront.identity.account import _UNSET, Account
from storefront.utils.lookup import fetch


@storefront.command(part_of="Account")
class UpdateAccountProfile:
    account_id: Identifier(required=True)
    full_name: String(max_length=100, sanitize=False)
    phone: String(max_length=20)
    address: Text(sanitize=False)  # JSON: address dict


@storefront.command(part_of="Account")
class GrantAdminRole:
    account_id: Identifier(required=True)
    granted_by: Identifier(required=True)


@storefront.command_handler(part_of=Account)
class AccountProfileHandler:
    @handle(UpdateAccountProfile)
    def update_profile(self, command):
        account = fetch(Account, command.account_id)
        account.update_profile(
            full_name=command.full_name if command.full_name is not None else _UNSET,
            phone=command.phone if command.phone is not None else _UNSET,
            address=json.loads(command.address) if command.address is not None else _UNSET,
        )
        current_domain.repository_for(Account).add(account)

    @handle(GrantAdminRole)
    def grant_admin_role(self, command):
        repo = current_domain.repository_for(Account)
        if not repo.is_admin(command.granted_by):
            raise ForbiddenError({"_entity": ["Only administrators can grant the admin role"]})

        account = fetch(Account, command.account_id)
        account.grant_admin()
        repo.add(account)
