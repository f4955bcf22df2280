from fastapi import Depends, Request
from sqlalchemy.orm import Session

from review_api.core.config import Settings
from review_api.core.guard import Identity, get_current_identity
from review_api.db.session import get_db
from review_api.services.credential_store import CredentialStore
from review_api.services.entity_repository import EntityRepository

__all__ = [
	"Identity",
	"get_current_identity",
	"get_credential_store",
	"get_db",
	"get_repository",
	"get_settings",
]

def get_settings(request: Request) -> Settings:
	return request.app.state.settings

def get_credential_store(request: Request, db: Session = Depends(get_db)) -> CredentialStore:
	return CredentialStore(db, request.app.state.password_hasher)

def get_repository(db: Session = Depends(get_db)) -> EntityRepository:
	return EntityRepository(db)
