# bontemp/triggers/watcher.py
"""
Firestore watch transport for like documents.

Listens to the 'likes' collection group and turns every document change into a
ChangeEvent for the EventDispatcher. The first snapshot only reports the documents
that already exist, so it is skipped.
"""

import logging
from typing import Optional

from bontemp.core.events import ChangeEvent, ChangeType, EventDispatcher
from bontemp.services.firestore_service import LIKES_SUBCOLLECTION

# google.cloud.firestore_v1.watch.ChangeType names
_CHANGE_TYPES = {
    'ADDED': ChangeType.CREATE,
    'MODIFIED': ChangeType.UPDATE,
    'REMOVED': ChangeType.DELETE,
}


def to_change_event(change) -> Optional[ChangeEvent]:
    """Converts a firestore DocumentChange, or returns None for an unknown change type."""
    change_type = _CHANGE_TYPES.get(change.type.name)
    if change_type is None:
        return None
    doc = change.document
    data = doc.to_dict()
    return ChangeEvent(
        path=doc.reference.path,
        change_type=change_type,
        before=data if change_type is ChangeType.DELETE else None,
        after=None if change_type is ChangeType.DELETE else data
    )


class LikesWatcher:
    def __init__(self, db, dispatcher: EventDispatcher):
        self.db = db
        self.dispatcher = dispatcher
        self._watch = None
        self._primed = False

    def start(self) -> None:
        self._primed = False
        self._watch = self.db.collection_group(LIKES_SUBCOLLECTION).on_snapshot(self._on_snapshot)
        logging.info("LikesWatcher: listening to the 'likes' collection group")

    def stop(self) -> None:
        if self._watch is not None:
            self._watch.unsubscribe()
            self._watch = None
            logging.info("LikesWatcher: stopped")

    def _on_snapshot(self, doc_snapshots, changes, read_time) -> None:
        # Runs on the watch thread; an exception here would end the stream.
        if not self._primed:
            self._primed = True
            logging.info(f"LikesWatcher: initial snapshot with {len(doc_snapshots)} likes skipped")
            return

        for change in changes:
            event = to_change_event(change)
            if event is None:
                continue
            try:
                self.dispatcher.dispatch(event)
            except Exception as e:
                logging.error(f"Dispatch failed for {event.change_type.value} on {event.path}: {e}", exc_info=True)
