# bontemp/api/comments/routes.py
from flask import Blueprint, request, jsonify, current_app, g

from bontemp.api.comments.schemas import CommentSubmitResponseSchema
from bontemp.core.errors import CallableError
from bontemp.core.security import identity_optional

comments_bp = Blueprint('comments_bp', __name__)


@comments_bp.route('/submitComment', methods=['POST'])
@identity_optional
def submit_comment():
    """
    Callable endpoint: body {"data": {"postId", "text"}}, Authorization: Bearer <Firebase ID token>.
    - 200 {"result": {"success": true}} when the comment is stored.
    - 401/403/400/500 {"error": {"status", "message"}} otherwise.
    """
    comment_service = current_app.services['comments']
    body = request.get_json(silent=True)
    data = body.get('data') if isinstance(body, dict) else None
    try:
        result = comment_service.submit_comment(data, g.caller)
        return jsonify({"result": CommentSubmitResponseSchema().dump(result)}), 200
    except CallableError as e:
        return jsonify(e.to_dict()), e.http_status
