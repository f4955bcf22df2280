from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from review_api.core.errors import InvalidToken, Unauthenticated
from review_api.core.security import TokenService
from review_api.db.session import get_db
from review_api.services.credential_store import CredentialStore

# auto_error=False: a missing or non-Bearer header must become our own 401 envelope
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
	user_id: str
	username: str


def resolve_caller(token: str | None, tokens: TokenService, store: CredentialStore) -> Identity:
	"""Map a bearer credential to the user it names.

	Read-only: no state is written, so it is safe to call on every protected
	request. Any failure (no token, bad token, user gone) is ``Unauthenticated``.
	"""
	if not token:
		raise Unauthenticated()
	try:
		user_id = tokens.verify_token(token)
	except InvalidToken as exc:
		raise Unauthenticated(exc.message)

	user = store.get_user(user_id)
	if not user:
		raise Unauthenticated("User not found")
	return Identity(user_id=user.id, username=user.username)


def get_token_service(request: Request) -> TokenService:
	return request.app.state.token_service


def get_current_identity(
	creds: HTTPAuthorizationCredentials | None = Depends(security),
	tokens: TokenService = Depends(get_token_service),
	db: Session = Depends(get_db),
) -> Identity:
	if creds is None:
		raise Unauthenticated("Missing bearer token")
	return resolve_caller(creds.credentials, tokens, CredentialStore(db))
