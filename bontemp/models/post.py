# bontemp/models/post.py
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

DEFAULT_USER_NAME = 'Anonimo'


@dataclass
class Post:
    """
    Document of the 'pubblicazioni' collection.
    Posts are created by the client app; the backend only rewrites ``likes``.
    """
    post_id: str
    image_url: Optional[str]
    timestamp: Optional[datetime]
    likes: int = 0
    thumbnail_url: Optional[str] = None
    user_name: Optional[str] = None
    user_photo_url: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, post_id: str, data: Dict[str, Any]) -> 'Post':
        """Builds a Post from raw document data. A missing or null ``likes`` counts as 0."""
        return cls(
            post_id=post_id,
            image_url=data.get('imageUrl'),
            timestamp=data.get('timestamp'),
            likes=data.get('likes') or 0,
            thumbnail_url=data.get('thumbnailUrl'),
            user_name=data.get('userName'),
            user_photo_url=data.get('userPhotoURL'),
            description=data.get('description')
        )
