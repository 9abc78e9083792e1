# bontemp/services/test_firestore_service.py
"""
Firestore read/write contract tests against a mocked client
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from firebase_admin import firestore

from bontemp.models.comment import Comment
from bontemp.models.daily_winner import DailyWinner
from bontemp.models.post import Post
from bontemp.services.firestore_service import FirestoreService


def _service():
    db = MagicMock()
    posts_ref = MagicMock(name='pubblicazioni')
    config_ref = MagicMock(name='configurazioniApp')
    db.collection.side_effect = lambda name: {'pubblicazioni': posts_ref, 'configurazioniApp': config_ref}[name]
    service = FirestoreService()
    service.init_app(db)
    return service, posts_ref, config_ref


def test_requires_init():
    with pytest.raises(RuntimeError):
        FirestoreService().count_likes('p1')


def test_count_likes_uses_subcollection_count():
    service, posts_ref, _ = _service()
    likes_ref = posts_ref.document.return_value.collection.return_value
    likes_ref.count.return_value.get.return_value = [[MagicMock(value=7)]]

    assert service.count_likes('p1') == 7
    posts_ref.document.assert_called_with('p1')
    posts_ref.document.return_value.collection.assert_called_with('likes')


def test_update_like_count_overwrites_field():
    service, posts_ref, _ = _service()
    service.update_like_count('p1', 4)
    posts_ref.document.assert_called_with('p1')
    posts_ref.document.return_value.update.assert_called_once_with({'likes': 4})


def test_find_posts_since_builds_range_query():
    service, posts_ref, _ = _service()
    lower_bound = datetime(2024, 5, 1, 21, 59, tzinfo=timezone.utc)
    doc = MagicMock(id='p1')
    doc.to_dict.return_value = {'imageUrl': 'https://img/1.jpg', 'likes': 2, 'timestamp': lower_bound}
    query = posts_ref.where.return_value.order_by.return_value
    query.stream.return_value = iter([doc])

    posts = service.find_posts_since(lower_bound)

    field_filter = posts_ref.where.call_args.kwargs['filter']
    assert (field_filter.field_path, field_filter.op_string, field_filter.value) == ('timestamp', '>=', lower_bound)
    posts_ref.where.return_value.order_by.assert_called_once_with('timestamp', direction=firestore.Query.DESCENDING)
    assert posts == [Post(post_id='p1', image_url='https://img/1.jpg', timestamp=lower_bound, likes=2)]


def test_save_daily_winner_overwrites_singleton():
    service, _, config_ref = _service()
    service.save_daily_winner(DailyWinner.none())

    config_ref.document.assert_called_once_with('vincitoreDelGiorno')
    written = config_ref.document.return_value.set.call_args.args[0]
    assert written == {
        'hasWinner': False,
        'message': 'Nessuna pubblicazione oggi',
        'calculatedAt': firestore.SERVER_TIMESTAMP
    }
    assert config_ref.document.return_value.set.call_args.kwargs == {}


def test_add_comment_appends_to_subcollection():
    service, posts_ref, _ = _service()
    comments_ref = posts_ref.document.return_value.collection.return_value
    comments_ref.add.return_value = (MagicMock(), MagicMock(id='c1'))

    comment_id = service.add_comment('p1', Comment(text='Bella foto!', user_id='u1', user_name='Giulia'))

    assert comment_id == 'c1'
    posts_ref.document.return_value.collection.assert_called_with('comments')
    body = comments_ref.add.call_args.args[0]
    assert body['text'] == 'Bella foto!'
    assert body['userId'] == 'u1'
    assert body['userImage'] is None
    assert body['timestamp'] is firestore.SERVER_TIMESTAMP
    assert body['flagCount'] == 0
    assert body['isHidden'] is False
