from fastapi import APIRouter, Depends, Request
from starlette import status

from review_api.core.errors import NotFound
from review_api.core.logging import log_event, request_id_of
from review_api.dependencies import Identity, get_current_identity, get_repository
from review_api.schemas.comments import CommentOut, CommentWrite
from review_api.schemas.items import ItemCreate, ItemOut
from review_api.schemas.reviews import ItemReviewOut, ReviewCreate, ReviewOut
from review_api.services.entity_repository import EntityRepository

router = APIRouter(prefix="/items", tags=["items"])

@router.get("", response_model=list[ItemOut])
def list_items(repo: EntityRepository = Depends(get_repository)):
	return repo.list_items()

@router.post("", response_model=ItemOut, status_code=status.HTTP_201_CREATED)
def create_item(
	request: Request,
	payload: ItemCreate,
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
):
	item = repo.create_item(payload.name, payload.description, payload.category)
	log_event("item_created", item_id=item.id, actor=identity.user_id, request_id=request_id_of(request))
	return item

@router.get("/{item_id}", response_model=ItemOut)
def get_item(item_id: str, repo: EntityRepository = Depends(get_repository)):
	item = repo.get_item(item_id)
	if not item:
		raise NotFound("Item not found")
	return item

@router.get("/{item_id}/reviews", response_model=list[ItemReviewOut])
def list_item_reviews(item_id: str, repo: EntityRepository = Depends(get_repository)):
	if not repo.get_item(item_id):
		raise NotFound("Item not found")
	return repo.fetch_item_reviews(item_id)

@router.post("/{item_id}/reviews", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def create_review(
	request: Request,
	item_id: str,
	payload: ReviewCreate,
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
):
	# owner always comes from the token, never from the body
	review = repo.create_review(identity.user_id, item_id, payload.rating, payload.review_text)
	log_event("review_created", review_id=review.id, item_id=item_id, actor=identity.user_id, request_id=request_id_of(request))
	return review

@router.post(
	"/{item_id}/reviews/{review_id}/comments",
	response_model=CommentOut,
	status_code=status.HTTP_201_CREATED,
)
def create_comment(
	request: Request,
	item_id: str,
	review_id: str,
	payload: CommentWrite,
	repo: EntityRepository = Depends(get_repository),
	identity: Identity = Depends(get_current_identity),
):
	review = repo.get_review(review_id)
	if review is not None and review.item_id != item_id:
		raise NotFound("Review not found")

	# a missing review is caught by the foreign key, not by the lookup above
	comment = repo.create_comment(identity.user_id, review_id, payload.comment_text)
	log_event("comment_created", comment_id=comment.id, review_id=review_id, actor=identity.user_id, request_id=request_id_of(request))
	return comment
