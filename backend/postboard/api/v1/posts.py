"""Post endpoints. Reads are public; mutations require a bearer token."""

from __future__ import annotations

from flask import Blueprint, request

from postboard.api.deps import json_response, require_auth, service_context, timing
from postboard.schemas import PostCreateSchema, PostFilterSchema, PostSchema, PostUpdateSchema
from postboard.services import PostCreateIn, PostService, PostUpdateIn

bp = Blueprint("posts", __name__)

post_schema = PostSchema()
post_list_schema = PostSchema(many=True)
post_create_schema = PostCreateSchema()
post_update_schema = PostUpdateSchema()
post_filter_schema = PostFilterSchema()


@bp.get("")
@timing
def list_posts():
    """Return all posts, or only those of ``?sender_id=``.
    ---
    tags: [Posts]
    parameters:
      - {in: query, name: sender_id, type: string, required: false}
    responses:
      200:
        description: Posts in creation order
    """

    filters = post_filter_schema.load(request.args)
    posts = PostService(ctx=service_context()).list_posts(sender_id=filters["sender_id"])
    return json_response({"data": post_list_schema.dump(posts)})


@bp.get("/<int:post_id>")
@timing
def get_post(post_id: int):
    """
    ---
    tags: [Posts]
    parameters:
      - {in: path, name: post_id, type: integer, required: true}
    responses:
      200:
        description: The post
      404:
        description: No such post
    """
    post = PostService(ctx=service_context()).get(post_id)
    return json_response({"data": post_schema.dump(post)})


@bp.post("")
@require_auth
@timing
def create_post():
    """Create a post owned by the caller.
    ---
    tags: [Posts]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, sender_id]
          properties:
            title: {type: string}
            sender_id: {type: string}
    responses:
      201:
        description: Created; owner_id is the caller
      401:
        description: Not authenticated
      422:
        description: Validation failed
    """

    payload = post_create_schema.load(request.get_json(silent=True) or {})
    post = PostService(ctx=service_context()).create(PostCreateIn(**payload))
    return json_response({"data": post_schema.dump(post)}, status=201)


@bp.put("/<int:post_id>")
@require_auth
@timing
def update_post(post_id: int):
    """Edit a post; only its owner may.
    ---
    tags: [Posts]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: post_id, type: integer, required: true}
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            title: {type: string}
            sender_id: {type: string}
    responses:
      200:
        description: Updated post
      401:
        description: Not authenticated
      403:
        description: Caller is not the owner
      404:
        description: No such post
    """
    payload = post_update_schema.load(request.get_json(silent=True) or {})
    post = PostService(ctx=service_context()).update(post_id, PostUpdateIn(**payload))
    return json_response({"data": post_schema.dump(post)})


@bp.delete("/<int:post_id>")
@require_auth
@timing
def delete_post(post_id: int):
    """Delete a post and its comments; only its owner may.
    ---
    tags: [Posts]
    security:
      - Bearer: []
    parameters:
      - {in: path, name: post_id, type: integer, required: true}
    responses:
      200:
        description: The deleted post
      401:
        description: Not authenticated
      403:
        description: Caller is not the owner
      404:
        description: No such post
    """
    post = PostService(ctx=service_context()).delete(post_id)
    return json_response({"data": post_schema.dump(post)})
