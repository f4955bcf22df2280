from fastapi import APIRouter, Depends, Request, Response
from starlette import status

from review_api.core.errors import NotFound
from review_api.core.logging import log_event, request_id_of
from review_api.dependencies import Identity, get_current_identity, get_repository
from review_api.schemas.favorites import FavoriteCreate, FavoriteOut
from review_api.services.entity_repository import EntityRepository

router = APIRouter(prefix="/favorites", tags=["favorites"])

@router.post("", response_model=FavoriteOut, status_code=status.HTTP_201_CREATED)
def create_favorite(
	request: Request,
	payload: FavoriteCreate,
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
):
	favorite = repo.create_favorite(identity.user_id, payload.item_id)
	log_event("favorite_created", favorite_id=favorite.id, item_id=payload.item_id, actor=identity.user_id, request_id=request_id_of(request))
	return favorite

@router.get("/me", response_model=list[FavoriteOut])
def list_my_favorites(
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
):
	return repo.list_favorites(identity.user_id)

@router.delete("/{favorite_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_favorite(
	request: Request,
	favorite_id: str,
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
):
	if not repo.delete_favorite(favorite_id, identity.user_id):
		raise NotFound("Favorite not found")
	log_event("favorite_deleted", favorite_id=favorite_id, actor=identity.user_id, request_id=request_id_of(request))
	return Response(status_code=status.HTTP_204_NO_CONTENT)
