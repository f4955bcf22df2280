from fastapi import APIRouter, Depends, Request, Response
from starlette import status

from review_api.core.config import Settings
from review_api.core.errors import NotFound
from review_api.core.logging import log_event, request_id_of
from review_api.core.ownership import enforce_ownership
from review_api.dependencies import Identity, get_current_identity, get_repository, get_settings
from review_api.schemas.comments import CommentOut
from review_api.schemas.reviews import ReviewOut, ReviewUpdate
from review_api.services.entity_repository import EntityRepository

router = APIRouter(prefix="/reviews", tags=["reviews"])

# declared before /{review_id} so "me" is not taken for an id
@router.get("/me", response_model=list[ReviewOut])
def list_my_reviews(
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
):
	return repo.list_reviews_by_user(identity.user_id)

@router.get("/{review_id}", response_model=ReviewOut)
def get_review(review_id: str, repo: EntityRepository = Depends(get_repository)):
	review = repo.get_review(review_id)
	if not review:
		raise NotFound("Review not found")
	return review

@router.get("/{review_id}/comments", response_model=list[CommentOut])
def list_review_comments(review_id: str, repo: EntityRepository = Depends(get_repository)):
	if not repo.get_review(review_id):
		raise NotFound("Review not found")
	return repo.list_review_comments(review_id)

@router.put("/{review_id}", response_model=ReviewOut)
def update_review(
	request: Request,
	review_id: str,
	payload: ReviewUpdate,
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
	settings: Settings = Depends(get_settings),
):
	review = repo.get_review(review_id)
	if not review:
		raise NotFound("Review not found")
	enforce_ownership(identity, review.user_id, settings.OWNERSHIP_POLICY, resource="Review")

	updated = repo.update_review(review_id, identity.user_id, payload.rating, payload.review_text)
	if not updated:
		raise NotFound("Review not found")
	log_event("review_updated", review_id=review_id, actor=identity.user_id, request_id=request_id_of(request))
	return updated

@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
	request: Request,
	review_id: str,
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
	settings: Settings = Depends(get_settings),
):
	review = repo.get_review(review_id)
	if not review:
		raise NotFound("Review not found")
	enforce_ownership(identity, review.user_id, settings.OWNERSHIP_POLICY, resource="Review")

	if not repo.delete_review(review_id, identity.user_id):
		raise NotFound("Review not found")
	log_event("review_deleted", review_id=review_id, actor=identity.user_id, request_id=request_id_of(request))
	return Response(status_code=status.HTTP_204_NO_CONTENT)
