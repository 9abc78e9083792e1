# bontemp/core/test_events.py
"""
Document change dispatch tests

Usage: python -m pytest bontemp/core/test_events.py -v
"""

from bontemp.core.events import ChangeEvent, ChangeType, EventDispatcher, compile_path_pattern

LIKE_PATTERN = 'pubblicazioni/{postId}/likes/{userId}'


def test_compile_path_pattern_extracts_wildcards():
    """Each wildcard captures exactly one path segment"""
    regex = compile_path_pattern(LIKE_PATTERN)

    match = regex.match('pubblicazioni/p1/likes/u1')
    assert match.groupdict() == {'postId': 'p1', 'userId': 'u1'}

    assert regex.match('pubblicazioni/p1/comments/c1') is None
    assert regex.match('pubblicazioni/p1/likes/u1/extra/doc') is None
    assert regex.match('pubblicazioni/p1/likes') is None


def test_dispatch_passes_params_to_handler():
    dispatcher = EventDispatcher()
    received = []
    dispatcher.register(LIKE_PATTERN, ChangeType.WRITE, received.append)

    delivered = dispatcher.dispatch(ChangeEvent(path='/pubblicazioni/p1/likes/u1', change_type=ChangeType.CREATE))

    assert delivered == 1
    assert received[0].params == {'postId': 'p1', 'userId': 'u1'}
    assert received[0].path == 'pubblicazioni/p1/likes/u1'
    assert received[0].change_type is ChangeType.CREATE


def test_write_subscription_receives_every_kind():
    dispatcher = EventDispatcher()
    kinds = []

    @dispatcher.on(LIKE_PATTERN)
    def handler(event):
        kinds.append(event.change_type)

    for change_type in (ChangeType.CREATE, ChangeType.UPDATE, ChangeType.DELETE):
        dispatcher.dispatch(ChangeEvent(path='pubblicazioni/p1/likes/u1', change_type=change_type))

    assert kinds == [ChangeType.CREATE, ChangeType.UPDATE, ChangeType.DELETE]


def test_kind_specific_subscription_filters_other_kinds():
    dispatcher = EventDispatcher()
    deleted = []
    dispatcher.register(LIKE_PATTERN, ChangeType.DELETE, deleted.append)

    assert dispatcher.dispatch(ChangeEvent(path='pubblicazioni/p1/likes/u1', change_type=ChangeType.CREATE)) == 0
    assert dispatcher.dispatch(ChangeEvent(path='pubblicazioni/p1/likes/u1', change_type=ChangeType.DELETE)) == 1
    assert len(deleted) == 1


def test_unmatched_path_is_ignored():
    dispatcher = EventDispatcher()
    received = []
    dispatcher.register(LIKE_PATTERN, ChangeType.WRITE, received.append)

    assert dispatcher.dispatch(ChangeEvent(path='configurazioniApp/vincitoreDelGiorno', change_type=ChangeType.UPDATE)) == 0
    assert received == []
