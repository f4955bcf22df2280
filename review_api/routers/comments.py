from fastapi import APIRouter, Depends, Request, Response
from starlette import status

from review_api.core.config import Settings
from review_api.core.errors import NotFound
from review_api.core.logging import log_event, request_id_of
from review_api.core.ownership import enforce_ownership
from review_api.dependencies import Identity, get_current_identity, get_repository, get_settings
from review_api.schemas.comments import CommentOut, CommentWrite
from review_api.services.entity_repository import EntityRepository

router = APIRouter(prefix="/comments", tags=["comments"])

@router.get("/me", response_model=list[CommentOut])
def list_my_comments(
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
):
	return repo.list_comments_by_user(identity.user_id)

@router.put("/{comment_id}", response_model=CommentOut)
def update_comment(
	request: Request,
	comment_id: str,
	payload: CommentWrite,
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
	settings: Settings = Depends(get_settings),
):
	comment = repo.get_comment(comment_id)
	if not comment:
		raise NotFound("Comment not found")
	enforce_ownership(identity, comment.user_id, settings.OWNERSHIP_POLICY, resource="Comment")

	updated = repo.update_comment(comment_id, identity.user_id, payload.comment_text)
	if not updated:
		raise NotFound("Comment not found")
	log_event("comment_updated", comment_id=comment_id, actor=identity.user_id, request_id=request_id_of(request))
	return updated

@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
	request: Request,
	comment_id: str,
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
	settings: Settings = Depends(get_settings),
):
	comment = repo.get_comment(comment_id)
	if not comment:
		raise NotFound("Comment not found")
	enforce_ownership(identity, comment.user_id, settings.OWNERSHIP_POLICY, resource="Comment")

	if not repo.delete_comment(comment_id, identity.user_id):
		raise NotFound("Comment not found")
	log_event("comment_deleted", comment_id=comment_id, actor=identity.user_id, request_id=request_id_of(request))
	return Response(status_code=status.HTTP_204_NO_CONTENT)
