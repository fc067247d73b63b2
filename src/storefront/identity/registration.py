"""Account registration — command and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.account import Account


@storefront.command(part_of="Account")
class RegisterAccount:
    """Create a customer account."""

    full_name: String(required=True, max_length=100, sanitize=False)
    email: String(required=True, max_length=254)
    phone: String(max_length=20)
    address: Text(sanitize=False)  # JSON: address dict


@storefront.command_handler(part_of=Account)
class RegisterAccountHandler:
    @handle(RegisterAccount)
    def register_account(self, command):
        repo = current_domain.repository_for(Account)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": ["An account with this email already exists"]})

        address = json.loads(command.address) if command.address else None
        account = Account.register(
            full_name=command.full_name,
            email=command.email,
            phone=command.phone,
            address=address,
        )
        repo.add(account)
        return str(account.id)
