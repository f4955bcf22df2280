from enum import Enum

from review_api.core.errors import Forbidden, NotFound
from review_api.core.guard import Identity

CONCEAL = "conceal"
EXPLICIT = "explicit"


class Decision(str, Enum):
	ALLOW = "allow"
	DENY = "deny"


def authorize_mutation(identity: Identity, resource_owner_id: str) -> Decision:
	if identity.user_id != resource_owner_id:
		return Decision.DENY
	return Decision.ALLOW


def enforce_ownership(identity: Identity, resource_owner_id: str, policy: str = CONCEAL, resource: str = "Record") -> None:
	"""Raise unless ``identity`` owns the resource.

	Under ``conceal`` a foreign record is reported exactly like a missing one.
	"""
	if authorize_mutation(identity, resource_owner_id) is Decision.ALLOW:
		return
	if policy == EXPLICIT:
		raise Forbidden(f"You do not own this {resource.lower()}")
	raise NotFound(f"{resource} not found")
