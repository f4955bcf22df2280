from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, validator

class ReviewCreate(BaseModel):
	rating: int = Field(ge=1, le=5, strict=True)
	review_text: Optional[str] = None

class ReviewUpdate(BaseModel):
	rating: Optional[int] = Field(default=None, ge=1, le=5, strict=True)
	review_text: Optional[str] = None

	@validator("review_text", always=True)
	def something_to_update(cls, v, values):
		if v is None and values.get("rating") is None:
			raise ValueError("Provide rating or review_text")
		return v

class ReviewOut(BaseModel):
	id: str
	user_id: str
	item_id: str
	rating: int
	review_text: Optional[str] = None
	created_at: Optional[datetime] = None

	class Config:
		from_attributes = True

class ItemReviewOut(ReviewOut):
	username: str
