from typing import Optional

from pydantic import BaseModel, Field, validator

class ItemCreate(BaseModel):
	name: str = Field(min_length=1, max_length=255)
	description: Optional[str] = None
	category: Optional[str] = Field(default=None, max_length=255)

	@validator("name")
	def name_not_blank(cls, v):
		v = v.strip()
		if not v:
			raise ValueError("Name must not be blank")
		return v

class ItemOut(BaseModel):
	id: str
	name: str
	description: Optional[str] = None
	category: Optional[str] = None

	class Config:
		from_attributes = True
