from flask import Blueprint, jsonify, request

from app.api.common import get_json_body, missing_body, parse_path_id
from app.services.post_service import PostService
from app.utils.validators import parse_bool_param

bp = Blueprint('posts', __name__, url_prefix='/api/posts')


@bp.route('', methods=['POST'])
def create_post():
    """Create Post
    ---
    post:
        summary: Create a review, community or list post
        requestBody:
            content:
              application/json:
                schema: PostCreateSchema
        responses:
            201:
                description: Returns the created post
                content:
                  application/json:
                    schema: PostCreatedResponseSchema
            400:
                description: Validation failed
                content:
                  application/json:
                    schema: ErrorSchema
            404:
                description: Author, spot or list not found
                content:
                  application/json:
                    schema: ErrorSchema
    """
    data = get_json_body()
    if data is None:
        return missing_body()

    result, status_code = PostService.create_post(data)
    return jsonify(result), status_code


@bp.route('', methods=['GET'])
def get_posts():
    """Get Posts
    ---
    get:
        summary: List posts, newest first
        parameters:
            - name: page
              in: query
              schema:
                type: integer
            - name: limit
              in: query
              description: page size, capped at 100
              schema:
                type: integer
            - name: userId
              in: query
              schema:
                type: integer
            - name: type
              in: query
              schema:
                type: string
                enum: [review, community, list]
        responses:
            200:
                description: Returns a page of posts
                content:
                  application/json:
                    schema: PostListResponseSchema
            400:
                description: Invalid filter
                content:
                  application/json:
                    schema: ErrorSchema
    """
    result, status_code = PostService.get_posts(request.args)
    return jsonify(result), status_code


@bp.route('/<post_id>', methods=['GET'])
def get_post(post_id):
    """Get Post
    ---
    get:
        summary: Get a post with author details
        parameters:
            - name: post_id
              in: path
              required: true
              schema:
                type: integer
        responses:
            200:
                description: Returns the post
            404:
                description: Post not found
                content:
                  application/json:
                    schema: ErrorSchema
    """
    post_id_num, error = parse_path_id(post_id, "Post")
    if error:
        return error

    result, status_code = PostService.get_post(post_id_num)
    return jsonify(result), status_code


@bp.route('/<post_id>', methods=['DELETE'])
def delete_post(post_id):
    """Delete Post
    ---
    delete:
        summary: Delete a post
        parameters:
            - name: post_id
              in: path
              required: true
              schema:
                type: integer
            - name: dryRun
              in: query
              schema:
                type: boolean
            - name: softDelete
              in: query
              description: mark the description instead of removing rows
              schema:
                type: boolean
        responses:
            200:
                description: Returns the deletion results or the dry-run impact
            404:
                description: Post not found
                content:
                  application/json:
                    schema: ErrorSchema
    """
    post_id_num, error = parse_path_id(post_id, "Post")
    if error:
        return error

    result, status_code = PostService.delete_post(
        post_id_num,
        dry_run=parse_bool_param(request.args.get('dryRun')),
        soft_delete=parse_bool_param(request.args.get('softDelete')),
    )
    return jsonify(result), status_code


@bp.route('/<post_id>/images', methods=['POST'])
def link_post_images(post_id):
    """Link Post Images
    ---
    post:
        summary: Attach uploaded images to a post
        parameters:
            - name: post_id
              in: path
              required: true
              schema:
                type: integer
        requestBody:
            content:
              application/json:
                schema: PostImagesLinkSchema
        responses:
            201:
                description: Returns the post's images in order
            404:
                description: Post or image not found
                content:
                  application/json:
                    schema: ErrorSchema
    """
    post_id_num, error = parse_path_id(post_id, "Post")
    if error:
        return error

    data = get_json_body()
    if data is None:
        return missing_body()

    result, status_code = PostService.link_images(post_id_num, data)
    return jsonify(result), status_code
