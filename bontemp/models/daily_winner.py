# bontemp/models/daily_winner.py
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Optional

from bontemp.models.post import Post, DEFAULT_USER_NAME

NO_POSTS_MESSAGE = 'Nessuna pubblicazione oggi'


@dataclass
class WinnerSnapshot:
    """Copy of the winning post embedded in the daily winner document."""
    postId: str
    imageUrl: Optional[str]
    thumbnailUrl: Optional[str]
    likes: int
    userName: str
    userPhotoURL: str
    timestamp: Optional[datetime]
    description: str

    @classmethod
    def from_post(cls, post: Post) -> 'WinnerSnapshot':
        return cls(
            postId=post.post_id,
            imageUrl=post.image_url,
            thumbnailUrl=post.thumbnail_url or post.image_url,
            likes=post.likes,
            userName=post.user_name or DEFAULT_USER_NAME,
            userPhotoURL=post.user_photo_url or '',
            timestamp=post.timestamp,
            description=post.description or ''
        )


@dataclass
class DailyWinner:
    """
    Singleton document 'configurazioniApp/vincitoreDelGiorno'.
    Exactly one of ``winner`` and ``message`` is set.
    """
    has_winner: bool
    winner: Optional[WinnerSnapshot] = None
    message: Optional[str] = None

    @classmethod
    def of(cls, post: Post) -> 'DailyWinner':
        return cls(has_winner=True, winner=WinnerSnapshot.from_post(post))

    @classmethod
    def none(cls, message: str = NO_POSTS_MESSAGE) -> 'DailyWinner':
        return cls(has_winner=False, message=message)

    def to_firestore(self, calculated_at: Any) -> Dict[str, Any]:
        """
        Document body for a full overwrite.

        :param calculated_at: value for 'calculatedAt', normally firestore.SERVER_TIMESTAMP
        """
        data: Dict[str, Any] = {'hasWinner': self.has_winner}
        if self.has_winner:
            data['winner'] = asdict(self.winner)
        else:
            data['message'] = self.message
        data['calculatedAt'] = calculated_at
        return data
