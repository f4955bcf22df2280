from fastapi import APIRouter, Depends, Request
from starlette import status

from review_api.core.errors import AuthenticationFailed
from review_api.core.guard import get_token_service
from review_api.core.logging import log_event, request_id_of
from review_api.core.security import TokenService
from review_api.dependencies import Identity, get_credential_store, get_current_identity
from review_api.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserOut
from review_api.services.credential_store import CredentialStore

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(
	request: Request,
	payload: RegisterRequest,
	store: CredentialStore = Depends(get_credential_store),
):
	user = store.create_user(payload.username, payload.password)
	log_event("user_registered", user_id=user.id, username=user.username, request_id=request_id_of(request))
	return user

@router.post("/login", response_model=TokenResponse)
def login(
	request: Request,
	payload: LoginRequest,
	store: CredentialStore = Depends(get_credential_store),
	tokens: TokenService = Depends(get_token_service),
):
	try:
		user_id = store.verify_credentials(payload.username, payload.password)
	except AuthenticationFailed:
		log_event("user_login_failed", request_id=request_id_of(request))
		raise

	log_event("user_login", user_id=user_id, request_id=request_id_of(request))
	return {"access_token": tokens.issue_token(user_id), "token_type": "bearer"}

@router.get("/me", response_model=UserOut)
def me(identity: Identity = Depends(get_current_identity)):
	return {"id": identity.user_id, "username": identity.username}
