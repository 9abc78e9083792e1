# bontemp/services/firestore_service.py
import logging
from datetime import datetime
from typing import List

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from bontemp.models.comment import Comment
from bontemp.models.daily_winner import DailyWinner
from bontemp.models.post import Post
from bontemp.utils.datetime_utils import DateTimeUtils

POSTS_COLLECTION = 'pubblicazioni'
LIKES_SUBCOLLECTION = 'likes'
COMMENTS_SUBCOLLECTION = 'comments'
CONFIG_COLLECTION = 'configurazioniApp'
DAILY_WINNER_DOCUMENT = 'vincitoreDelGiorno'

# Document path patterns, used to subscribe change handlers
LIKE_DOCUMENT_PATTERN = f"{POSTS_COLLECTION}/{{postId}}/{LIKES_SUBCOLLECTION}/{{userId}}"


class FirestoreService:
    """
    Read/write contract of the backend with Firestore.
    Every method is a single query or a single document write; errors are raised to the caller.
    """

    def __init__(self):
        """The client is bound in init_app so the service can be created before firebase_admin is initialized."""
        self.db = None
        self.posts_ref = None
        self.config_ref = None

    def init_app(self, db=None):
        """
        :param db: Firestore client; defaults to the one of the default firebase_admin app
        """
        self.db = db if db is not None else firestore.client()
        self.posts_ref = self.db.collection(POSTS_COLLECTION)
        self.config_ref = self.db.collection(CONFIG_COLLECTION)
        logging.info("FirestoreService: Firestore client bound.")

    def _require_client(self):
        if self.db is None:
            raise RuntimeError("FirestoreService is not initialized. Call init_app first.")

    # --- likes ---
    def count_likes(self, post_id: str) -> int:
        """Number of documents in pubblicazioni/{post_id}/likes (server-side count aggregation)."""
        self._require_client()
        likes_ref = self.posts_ref.document(post_id).collection(LIKES_SUBCOLLECTION)
        results = likes_ref.count(alias='total').get()
        return int(results[0][0].value)

    def update_like_count(self, post_id: str, likes: int) -> None:
        """Overwrites the denormalized counter. Fails if the post no longer exists."""
        self._require_client()
        self.posts_ref.document(post_id).update({'likes': likes})

    # --- posts / daily winner ---
    def find_posts_since(self, lower_bound: datetime) -> List[Post]:
        """Posts with timestamp >= lower_bound, most recent first."""
        self._require_client()
        query = (
            self.posts_ref
            .where(filter=FieldFilter('timestamp', '>=', lower_bound))
            .order_by('timestamp', direction=firestore.Query.DESCENDING)
        )
        return [Post.from_dict(doc.id, DateTimeUtils.from_firestore(doc.to_dict() or {})) for doc in query.stream()]

    def save_daily_winner(self, daily_winner: DailyWinner) -> None:
        """Full overwrite of configurazioniApp/vincitoreDelGiorno; calculatedAt is assigned by the server."""
        self._require_client()
        self.config_ref.document(DAILY_WINNER_DOCUMENT).set(
            daily_winner.to_firestore(firestore.SERVER_TIMESTAMP)
        )

    # --- comments ---
    def add_comment(self, post_id: str, comment: Comment) -> str:
        """Appends a comment to pubblicazioni/{post_id}/comments and returns the new document id."""
        self._require_client()
        comments_ref = self.posts_ref.document(post_id).collection(COMMENTS_SUBCOLLECTION)
        _, doc_ref = comments_ref.add(comment.to_firestore(firestore.SERVER_TIMESTAMP))
        return doc_ref.id
