# bontemp/triggers/daily_winner.py
import logging
from datetime import datetime
from typing import Iterable, Optional

from bontemp.models.daily_winner import DailyWinner
from bontemp.models.post import Post
from bontemp.services.firestore_service import FirestoreService
from bontemp.utils.datetime_utils import DateTimeUtils

WINDOW_HOURS = 24


def select_winner(posts: Iterable[Post]) -> Optional[Post]:
    """
    Post with the most likes, or None for no posts.

    Only a strictly greater count replaces the candidate, so among equal counts the
    first post wins. Posts arrive most recent first, which makes the newest post win ties.
    """
    winner = None
    max_likes = -1
    for post in posts:
        if post.likes > max_likes:
            max_likes = post.likes
            winner = post
    return winner


class DailyWinnerService:
    """Picks the most liked post of the last 24 hours and stores it in configurazioniApp/vincitoreDelGiorno."""

    def __init__(self, store: FirestoreService):
        self.store = store

    def calculate_daily_winner(self, now: Optional[datetime] = None) -> Optional[DailyWinner]:
        """
        Runs one aggregation and overwrites the daily winner document.

        Failures are logged and swallowed; the next scheduled run writes a fresh record.

        :param now: end of the window, defaults to the current time
        :return: the record written, or None if the run failed
        """
        try:
            logging.info("Daily winner calculation started")
            lower_bound = DateTimeUtils.window_start(WINDOW_HOURS, now)
            posts = self.store.find_posts_since(lower_bound)
            logging.info(f"{len(posts)} posts found since {DateTimeUtils.to_iso_string(lower_bound)}")

            if not posts:
                daily_winner = DailyWinner.none()
                self.store.save_daily_winner(daily_winner)
                logging.info("No posts in the last 24h, placeholder saved")
                return daily_winner

            daily_winner = DailyWinner.of(select_winner(posts))
            self.store.save_daily_winner(daily_winner)
            logging.info(f"Daily winner: post {daily_winner.winner.postId} with {daily_winner.winner.likes} likes")
            return daily_winner

        except Exception as e:
            logging.error(f"Daily winner calculation failed: {e}", exc_info=True)
            return None
