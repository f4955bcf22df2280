from fastapi import APIRouter, Depends

from review_api.dependencies import get_credential_store
from review_api.schemas.auth import UserOut
from review_api.services.credential_store import CredentialStore

# Diagnostic listing with no authorization model; mounted only when EXPOSE_USER_LIST is set.
router = APIRouter(prefix="/users", tags=["users"])

@router.get("", response_model=list[UserOut])
def list_users(store: CredentialStore = Depends(get_credential_store)):
	return store.list_users()
