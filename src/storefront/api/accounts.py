"""FastAPI endpoints for accounts."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_account, require_admin
from storefront.api.schemas import (
    AccountIdResponse,
    AccountResponse,
    AddressSchema,
    AdminUpdateAccountRequest,
    RegisterAccountRequest,
    StatusResponse,
    UpdateAccountRequest,
)
from storefront.identity.account import Account
from storefront.identity.administration import RemoveAccount, UpdateAccount
from storefront.identity.profile import GrantAdminRole, UpdateAccountProfile
from storefront.identity.registration import RegisterAccount
from storefront.utils.lookup import fetch

router = APIRouter(prefix="/accounts", tags=["accounts"])


def _account_response(account: Account) -> AccountResponse:
    address = None
    if account.address:
        address = AddressSchema(
            street=account.address.street,
            city=account.address.city,
            state=account.address.state,
            postal_code=account.address.postal_code,
            country=account.address.country,
        )
    return AccountResponse(
        account_id=str(account.id),
        full_name=account.full_name,
        email=account.email,
        phone=account.phone,
        address=address,
        role=account.role,
    )


@router.post("", status_code=201, response_model=AccountIdResponse)
async def register_account(body: RegisterAccountRequest) -> AccountIdResponse:
    command = RegisterAccount(
        full_name=body.full_name,
        email=body.email,
        phone=body.phone,
        address=json.dumps(body.address.model_dump()) if body.address else None,
    )
    result = current_domain.process(command, asynchronous=False)
    return AccountIdResponse(account_id=result)


@router.get("/me", response_model=AccountResponse)
async def my_account(account: Account = Depends(current_account)) -> AccountResponse:
    return _account_response(account)


@router.put("/me", response_model=AccountResponse)
async def update_my_account(
    body: UpdateAccountRequest,
    account: Account = Depends(current_account),
) -> AccountResponse:
    command = UpdateAccountProfile(
        account_id=str(account.id),
        full_name=body.full_name,
        phone=body.phone,
        address=json.dumps(body.address.model_dump()) if body.address else None,
    )
    current_domain.process(command, asynchronous=False)
    return _account_response(current_domain.repository_for(Account).get(str(account.id)))


@router.put("/{account_id}/admin", response_model=StatusResponse)
async def grant_admin(account_id: str, caller: Account = Depends(current_account)) -> StatusResponse:
    command = GrantAdminRole(account_id=account_id, granted_by=str(caller.id))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.get("", response_model=list[AccountResponse])
async def all_accounts(caller: Account = Depends(current_account)) -> list[AccountResponse]:
    require_admin(caller)
    return [_account_response(a) for a in current_domain.repository_for(Account).everyone()]


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(account_id: str, caller: Account = Depends(current_account)) -> AccountResponse:
    require_admin(caller)
    return _account_response(fetch(Account, account_id))


@router.put("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: str,
    body: AdminUpdateAccountRequest,
    caller: Account = Depends(current_account),
) -> AccountResponse:
    command = UpdateAccount(
        account_id=account_id,
        updated_by=str(caller.id),
        full_name=body.full_name,
        email=body.email,
        role=body.role,
    )
    current_domain.process(command, asynchronous=False)
    return _account_response(fetch(Account, account_id))


@router.delete("/{account_id}", response_model=StatusResponse)
async def remove_account(account_id: str, caller: Account = Depends(current_account)) -> StatusResponse:
    current_domain.process(RemoveAccount(account_id=account_id, removed_by=str(caller.id)), asynchronous=False)
    return StatusResponse()
