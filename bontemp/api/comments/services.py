# bontemp/api/comments/services.py

import logging
import re
from typing import Any, Dict, Optional

from marshmallow import ValidationError

from bontemp.api.comments.schemas import CommentSubmitSchema
from bontemp.core.errors import CallableError, Internal, InvalidArgument, PermissionDenied, Unauthenticated
from bontemp.core.security import CallerIdentity
from bontemp.models.comment import Comment, DEFAULT_COMMENT_USER_NAME
from bontemp.services.firestore_service import FirestoreService
from bontemp.services.safety_service import SafetyService

DEFAULT_MAX_LENGTH = 500

# Leading and trailing whitespace, including the byte order mark
_EDGE_BLANKS = re.compile(r'^[\s\ufeff]+|[\s\ufeff]+$')

MSG_UNAUTHENTICATED = "Devi effettuare l'accesso per commentare."
MSG_ANONYMOUS = "Gli utenti anonimi non possono commentare. Accedi con un account."
MSG_INVALID_POST_ID = "postId mancante o non valido."
MSG_INVALID_TEXT = "Il testo del commento è mancante o non valido."
MSG_INVALID_REQUEST = "Richiesta non valida."
MSG_EMPTY_TEXT = "Il commento non può essere vuoto."
MSG_TOO_LONG = "Il commento non può superare i {max_length} caratteri."
MSG_UNSAFE = "Il commento viola le linee guida della community."
MSG_INTERNAL = "Impossibile pubblicare il commento in questo momento. Riprova più tardi."


class CommentService:
    """
    Comment submission pipeline.

    identity check -> request structure -> trimmed text -> safety classification -> persistence.
    The first failing step ends the call with a typed CallableError.
    """

    def __init__(self, store: FirestoreService, safety_service: SafetyService, max_length: int = DEFAULT_MAX_LENGTH):
        self.store = store
        self.safety_service = safety_service
        self.max_length = max_length

    def submit_comment(self, data: Any, identity: Optional[CallerIdentity]) -> Dict[str, Any]:
        """
        Validates, classifies and stores a comment.

        :param data: callable payload, expected {'postId': str, 'text': str}
        :param identity: verified caller, or None when the request carried no valid ID token
        :return: {'success': True}
        :raises CallableError: Unauthenticated, PermissionDenied, InvalidArgument or Internal
        """
        self._check_identity(identity)
        payload = self._load_request(data)
        post_id = payload['postId']
        text = self._validate_text(payload['text'])

        try:
            verdict = self.safety_service.classify(text)
            if verdict.is_unsafe:
                logging.warning(
                    f"Comment rejected by the classifier (post_id: {post_id}, user: {identity.uid}, "
                    f"block_reason: {verdict.block_reason}, categories: {verdict.flagged_categories})"
                )
                raise InvalidArgument(MSG_UNSAFE)
            if verdict.is_ambiguous:
                # Accepted: only an explicit UNSAFE answer or a block rejects a comment.
                logging.warning(f"Ambiguous classifier answer accepted (post_id: {post_id}): {verdict.verdict!r}")

            comment = Comment(
                text=text,
                user_id=identity.uid,
                user_name=identity.name or DEFAULT_COMMENT_USER_NAME,
                user_image=identity.picture or None
            )
            comment_id = self.store.add_comment(post_id, comment)
            logging.info(f"Comment {comment_id} added to post {post_id} by {identity.uid}")
            return {"success": True}

        except CallableError:
            raise
        except Exception as e:
            logging.error(f"Comment submission failed (post_id: {post_id}): {e}", exc_info=True)
            raise Internal(MSG_INTERNAL) from e

    def _check_identity(self, identity: Optional[CallerIdentity]) -> None:
        if identity is None:
            raise Unauthenticated(MSG_UNAUTHENTICATED)
        if identity.is_anonymous:
            raise PermissionDenied(MSG_ANONYMOUS)

    def _load_request(self, data: Any) -> Dict[str, Any]:
        try:
            return CommentSubmitSchema().load(data)
        except ValidationError as err:
            messages = err.messages if isinstance(err.messages, dict) else {}
            if 'postId' in messages:
                raise InvalidArgument(MSG_INVALID_POST_ID)
            if 'text' in messages:
                raise InvalidArgument(MSG_INVALID_TEXT)
            raise InvalidArgument(MSG_INVALID_REQUEST)

    def _validate_text(self, text: str) -> str:
        trimmed = _EDGE_BLANKS.sub('', text)
        if not trimmed:
            raise InvalidArgument(MSG_EMPTY_TEXT)
        if len(trimmed) > self.max_length:
            raise InvalidArgument(MSG_TOO_LONG.format(max_length=self.max_length))
        return trimmed
