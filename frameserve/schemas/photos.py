# frameserve/schemas/photos.py
from pydantic import BaseModel
from typing import List

class Photo(BaseModel):
    url: str
    name: str
    mtime: int  # unix seconds
    size: int   # bytes

class PhotoListing(BaseModel):
    photos: List[Photo]
    count: int
