# bontemp/api/comments/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE


class CommentSubmitSchema(Schema):
    """
    'data' payload of the submitComment callable.
    Only structure is checked here; the trimmed text length is checked by CommentService.
    """
    class Meta:
        unknown = EXCLUDE

    # a single document id: non-empty, no path separator
    postId = fields.Str(required=True, validate=validate.Regexp(r'^[^/]+$'))
    text = fields.Str(required=True)


class CommentSubmitResponseSchema(Schema):
    """'result' payload of a successful submitComment call."""
    success = fields.Bool(required=True)
