"""Comment endpoints nested under posts for listing/creation."""

from __future__ import annotations

from flask import Blueprint, request

from postboard.api.deps import json_response, require_auth, service_context, timing
from postboard.schemas import CommentCreateSchema, CommentSchema, CommentUpdateSchema
from postboard.services import CommentCreateIn, CommentService, CommentUpdateIn

bp = Blueprint("comments", __name__)

comment_schema = CommentSchema()
comment_list_schema = CommentSchema(many=True)
comment_create_schema = CommentCreateSchema()
comment_update_schema = CommentUpdateSchema()


@bp.get("/post/<int:post_id>")
@timing
def list_for_post(post_id: int):
    """
    ---
    tags: [Comments]
    parameters:
      - {in: path, name: post_id, type: integer, required: true}
    responses:
      200:
        description: Comments of the post in creation order
    """
    comments = CommentService(ctx=service_context()).list_for_post(post_id)
    return json_response({"data": comment_list_schema.dump(comments)})


@bp.post("/post/<int:post_id>")
@require_auth
@timing
def create_comment(post_id: int):
    """Comment on an existing post as the caller.
    ---
    tags: [Comments]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: post_id, type: integer, required: true}
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [content, author]
          properties:
            content: {type: string}
            author: {type: string}
    responses:
      201:
        description: Created
      401:
        description: Not authenticated
      404:
        description: No such post
      422:
        description: Validation failed
    """

    payload = comment_create_schema.load(request.get_json(silent=True) or {})
    comment = CommentService(ctx=service_context()).create(post_id, CommentCreateIn(**payload))
    return json_response({"data": comment_schema.dump(comment)}, status=201)


@bp.get("/<int:comment_id>")
@timing
def get_comment(comment_id: int):
    """
    ---
    tags: [Comments]
    parameters:
      - {in: path, name: comment_id, type: integer, required: true}
    responses:
      200:
        description: The comment
      404:
        description: No such comment
    """
    comment = CommentService(ctx=service_context()).get(comment_id)
    return json_response({"data": comment_schema.dump(comment)})


@bp.put("/<int:comment_id>")
@require_auth
@timing
def update_comment(comment_id: int):
    """Edit a comment; only its owner may.
    ---
    tags: [Comments]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: comment_id, type: integer, required: true}
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            content: {type: string}
    responses:
      200:
        description: Updated comment
      401:
        description: Not authenticated
      403:
        description: Caller is not the owner
      404:
        description: No such comment
    """
    payload = comment_update_schema.load(request.get_json(silent=True) or {})
    comment = CommentService(ctx=service_context()).update(comment_id, CommentUpdateIn(**payload))
    return json_response({"data": comment_schema.dump(comment)})


@bp.delete("/<int:comment_id>")
@require_auth
@timing
def delete_comment(comment_id: int):
    """Delete a comment; only its owner may.
    ---
    tags: [Comments]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: comment_id, type: integer, required: true}
    responses:
      200:
        description: Comment deleted successfully
      401:
        description: Not authenticated
      403:
        description: Caller is not the owner
      404:
        description: No such comment
    """
    CommentService(ctx=service_context()).delete(comment_id)
    return json_response({"message": "Comment deleted successfully"})
