# bontemp/models/comment.py
from dataclasses import dataclass
from typing import Any, Dict, Optional

DEFAULT_COMMENT_USER_NAME = 'Utente'


@dataclass
class Comment:
    """
    Document of the 'pubblicazioni/{postId}/comments' subcollection.
    Only written after the text passed the safety classifier.
    """
    text: str
    user_id: str
    user_name: str = DEFAULT_COMMENT_USER_NAME
    user_image: Optional[str] = None
    flag_count: int = 0
    is_hidden: bool = False

    def to_firestore(self, timestamp: Any) -> Dict[str, Any]:
        """
        Document body in the field names the client app reads.

        :param timestamp: value for 'timestamp', normally firestore.SERVER_TIMESTAMP
        """
        return {
            'text': self.text,
            'userId': self.user_id,
            'userName': self.user_name,
            'userImage': self.user_image,
            'timestamp': timestamp,
            'flagCount': self.flag_count,
            'isHidden': self.is_hidden
        }
