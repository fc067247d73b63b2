"""Request-scoped dependencies shared by the storefront routers."""

from fastapi import Header, HTTPException
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.identity.account import Account


def current_account(x_user_id: str = Header(default="")) -> Account:
    """The account named by the X-User-Id header; 401 when absent or unknown."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authorized, no caller identity")
    try:
        return current_domain.repository_for(Account).get(x_user_id)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=401, detail="Not authorized, unknown caller") from exc


def require_admin(account: Account) -> Account:
    if not account.is_admin:
        raise HTTPException(status_code=403, detail="Not authorized as an admin")
    return account
