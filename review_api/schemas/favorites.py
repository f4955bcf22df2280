from typing import Optional

from pydantic import BaseModel

class FavoriteCreate(BaseModel):
	item_id: str

class FavoriteOut(BaseModel):
	id: str
	user_id: str
	item_id: str
	item_name: Optional[str] = None

	class Config:
		from_attributes = True
