# bontemp/triggers/likes.py
import logging
from typing import Optional

from bontemp.core.events import ChangeEvent, ChangeType, EventDispatcher
from bontemp.services.firestore_service import FirestoreService, LIKE_DOCUMENT_PATTERN


class LikeCountService:
    """
    Keeps 'pubblicazioni/{postId}.likes' equal to the size of its 'likes' subcollection.

    Every like write triggers a full recount followed by an overwrite, so a missed,
    duplicated or out-of-order event is corrected by the next one.
    """

    def __init__(self, store: FirestoreService):
        self.store = store

    def register(self, dispatcher: EventDispatcher) -> None:
        """Subscribes to create, update and delete of any like document."""
        dispatcher.register(LIKE_DOCUMENT_PATTERN, ChangeType.WRITE, self.on_like_written)

    def on_like_written(self, event: ChangeEvent) -> None:
        self.sync_like_count(event.params['postId'])

    def sync_like_count(self, post_id: str) -> Optional[int]:
        """
        Recounts the likes of a post and writes the result on the post.

        Failures are logged and swallowed: the counter stays stale until the next like event.

        :param post_id: id of the document in 'pubblicazioni'
        :return: the count written, or None if the update failed
        """
        try:
            likes_count = self.store.count_likes(post_id)
            self.store.update_like_count(post_id, likes_count)
            logging.info(f"Post {post_id}: likes updated to {likes_count}")
            return likes_count
        except Exception as e:
            logging.error(f"Likes update failed for post {post_id}: {e}", exc_info=True)
            return None
