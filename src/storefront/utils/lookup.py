"""Repository lookups that report missing aggregates as ``NotFoundError``."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.exceptions import NotFoundError


def fetch(aggregate_cls, identifier, label: str | None = None):
    """Load an aggregate by id from the active domain's repository."""
    label = label or aggregate_cls.__name__
    try:
        return current_domain.repository_for(aggregate_cls).get(str(identifier))
    except ObjectNotFoundError as exc:
        raise NotFoundError({"_entity": [f"{label} `{identifier}` does not exist"]}) from exc
