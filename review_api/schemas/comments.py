from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, validator

class CommentWrite(BaseModel):
	comment_text: str = Field(min_length=1)

	@validator("comment_text")
	def text_not_blank(cls, v):
		if not v.strip():
			raise ValueError("Comment must not be blank")
		return v

class CommentOut(BaseModel):
	id: str
	review_id: str
	user_id: str
	comment_text: str
	created_at: Optional[datetime] = None

	class Config:
		from_attributes = True
