from datetime import datetime

from flask import current_app
from sqlalchemy.orm import joinedload

from app.extensions import cache, db
from app.models import (
    POST_TYPES,
    CommunityPost,
    Image,
    List,
    ListPost,
    Post,
    PostImage,
    ReviewPost,
    Spot,
    User,
)
from app.models.base import isoformat
from app.utils.responses import error_response
from app.utils.transactions import transaction
from app.utils.validators import (
    is_positive_int,
    parse_int_param,
    validate_max_length,
    validate_required_fields,
)

TITLE_MAX_LENGTH = 45
DESCRIPTION_MAX_LENGTH = 500
SOFT_DELETE_MARKER = " [DELETED]"


class PostService:
    """Service class for posts and their subtype rows."""

    @staticmethod
    def create_post(data):
        """Validate and insert a base post plus its subtype row in one transaction."""
        is_valid, message = validate_required_fields(data, ("type", "user_id"))
        if not is_valid:
            return error_response(message, 400)

        post_type = data.get("type")
        if post_type not in POST_TYPES:
            return error_response(f"Invalid post type. Must be one of: {', '.join(POST_TYPES)}", 400)

        user_id = data.get("user_id")
        if not is_positive_int(user_id):
            return error_response("user_id must be a positive integer", 400)

        description = data.get("description") or None
        is_valid, message = validate_max_length(description, "description", DESCRIPTION_MAX_LENGTH)
        if not is_valid:
            return error_response(message, 400)

        if post_type == "review":
            spot_id = data.get("spot_id")
            rating = data.get("rating")
            if spot_id is None or rating is None:
                return error_response("Review posts require spot_id and rating", 400)
            if not is_positive_int(spot_id):
                return error_response("spot_id must be a positive integer", 400)
            if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
                return error_response("Rating must be between 1 and 5", 400)
        else:
            title = data.get("title")
            list_id = data.get("list_id")
            if not title or list_id is None:
                return error_response("Community and list posts require title and list_id", 400)
            if not isinstance(title, str) or not title.strip():
                return error_response("title cannot be empty or just whitespace", 400)
            is_valid, message = validate_max_length(title, "title", TITLE_MAX_LENGTH)
            if not is_valid:
                return error_response(message, 400)
            if not is_positive_int(list_id):
                return error_response("list_id must be a positive integer", 400)

        if db.session.get(User, user_id) is None:
            return error_response(f"User with ID {user_id} does not exist", 404)
        if post_type == "review" and db.session.get(Spot, spot_id) is None:
            return error_response(f"Spot with ID {spot_id} does not exist", 404)
        if post_type != "review" and db.session.get(List, list_id) is None:
            return error_response(f"List with ID {list_id} does not exist", 404)

        post = Post(description=description, user_id=user_id, type=post_type)
        with transaction(f"creating {post_type} post") as session:
            session.add(post)
            session.flush()
            session.add(PostService._build_detail(post, data))

        if post_type == "review":
            # Spot statistics in cached listings change with each review
            cache.clear()
        current_app.logger.info(f"Created {post_type} post {post.post_id} for user {user_id}")

        response_data = {
            "post_id": post.post_id,
            "type": post_type,
            "description": description,
            "user_id": user_id,
            "created_date": isoformat(post.created_date),
        }
        if post_type == "review":
            response_data.update({"spot_id": spot_id, "rating": rating})
        else:
            response_data.update({"title": title, "list_id": list_id})

        return {
            "success": True,
            "post_id": post.post_id,
            "message": "Post created successfully",
            "data": response_data,
        }, 201

    @staticmethod
    def _build_detail(post, data):
        if post.type == "review":
            return ReviewPost(post_id=post.post_id, spot_id=data["spot_id"], rating=data["rating"])
        model = CommunityPost if post.type == "community" else ListPost
        return model(post_id=post.post_id, title=data["title"], list_id=data["list_id"])

    @staticmethod
    def get_posts(args):
        """Newest-first post listing with optional author and type filters."""
        page = parse_int_param(args.get("page"), 1)
        max_page_size = current_app.config.get("API_MAX_PAGE_SIZE", 100)
        default_page_size = current_app.config.get("API_DEFAULT_PAGE_SIZE", 20)
        limit = min(parse_int_param(args.get("limit"), default_page_size), max_page_size)
        user_id = args.get("userId")
        post_type = args.get("type")

        query = Post.query
        if user_id:
            user_id_num = parse_int_param(user_id, 0)
            if not user_id_num:
                return error_response("userId must be a positive integer", 400)
            query = query.filter(Post.user_id == user_id_num)
        if post_type:
            if post_type not in POST_TYPES:
                return error_response(f"Invalid post type. Must be one of: {', '.join(POST_TYPES)}", 400)
            query = query.filter(Post.type == post_type)

        total = query.count()
        offset = (page - 1) * limit
        posts = (
            query.options(
                joinedload(Post.user),
                joinedload(Post.review).joinedload(ReviewPost.spot),
                joinedload(Post.community).joinedload(CommunityPost.list),
                joinedload(Post.list_post).joinedload(ListPost.list),
            )
            .order_by(Post.created_date.desc(), Post.post_id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

        return {
            "success": True,
            "posts": [post.get_dict() for post in posts],
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "hasMore": offset + len(posts) < total,
            },
        }, 200

    @staticmethod
    def get_post(post_id):
        post = db.session.get(Post, post_id)
        if post is None:
            return error_response("Post not found", 404)
        return {"success": True, "post": post.get_dict(detailed=True)}, 200

    @staticmethod
    def assess_deletion(post):
        """Impact of deleting a post: its type, attached images and warnings."""
        images = list(post.images)
        impact = {
            "post_info": {
                "post_id": post.post_id,
                "type": post.type,
                "description": post.description,
                "user_id": post.user_id,
                "username": post.user.username if post.user else None,
                "created_date": isoformat(post.created_date),
                "associated_images": len(images),
            },
            "deletion_impact": {
                "post_images_to_unlink": len(images),
                "type_specific_data": post.type,
            },
            "warnings": [],
        }

        detail = post.detail
        if post.type == "review" and detail is not None:
            spot_name = detail.spot.spot_name if detail.spot else None
            impact["deletion_impact"]["review_impact"] = {
                "spot_affected": spot_name,
                "rating_removed": detail.rating,
                "will_affect_spot_average": True,
            }
            impact["warnings"].append(f'Rating of {detail.rating} stars for "{spot_name}" will be removed')
            impact["warnings"].append("This will affect the spot's average rating")
        elif post.type == "community" and detail is not None:
            list_name = detail.list.list_name if detail.list else None
            impact["deletion_impact"]["community_impact"] = {
                "shared_list": list_name,
                "community_visibility_lost": True,
            }
            impact["warnings"].append(f'Community visibility of list "{list_name}" will be removed')
        elif post.type == "list" and detail is not None:
            impact["deletion_impact"]["list_impact"] = {
                "shared_list": detail.list.list_name if detail.list else None,
                "personal_sharing_removed": True,
            }

        if images:
            impact["warnings"].append(f"{len(images)} images will be unlinked (but not deleted from storage)")

        return impact

    @staticmethod
    def delete_post(post_id, dry_run=False, soft_delete=False):
        """Hard or soft delete a post, or preview the impact."""
        post = db.session.get(Post, post_id)
        if post is None:
            return error_response(f"Post with ID {post_id} does not exist", 404)

        impact = PostService.assess_deletion(post)
        if dry_run:
            return {
                "success": True,
                "message": "Dry run completed - no data was deleted",
                "dry_run": True,
                "would_delete": impact,
            }, 200

        post_type = post.type
        detail = post.detail
        spot_name = detail.spot.spot_name if post_type == "review" and detail and detail.spot else None
        rating = detail.rating if post_type == "review" and detail else None
        list_name = detail.list.list_name if post_type != "review" and detail and detail.list else None
        deleted_post = {
            "post_id": post.post_id,
            "type": post_type,
            "description": post.description,
            "user_id": post.user_id,
            "username": post.user.username if post.user else None,
            "created_date": isoformat(post.created_date),
        }

        deletion_results = {
            "post_images_deleted": 0,
            "type_specific_deleted": False,
            "base_post_deleted": False,
            "soft_deleted": soft_delete,
        }

        with transaction(f"deleting post {post_id}") as session:
            if soft_delete:
                post.description = (post.description or "") + SOFT_DELETE_MARKER
                deletion_results["base_post_deleted"] = True
            else:
                deletion_results["post_images_deleted"] = (
                    session.query(PostImage).filter(PostImage.post_id == post_id).delete(synchronize_session=False)
                )
                detail_model = {"review": ReviewPost, "community": CommunityPost, "list": ListPost}[post_type]
                deletion_results["type_specific_deleted"] = (
                    session.query(detail_model)
                    .filter(detail_model.post_id == post_id)
                    .delete(synchronize_session=False) > 0
                )
                deletion_results["base_post_deleted"] = (
                    session.query(Post).filter(Post.post_id == post_id).delete(synchronize_session=False) == 1
                )
                session.expire_all()

        if post_type == "review":
            cache.clear()
        current_app.logger.info(f"Deleted post {post_id} (soft={soft_delete})")

        deleted_post["deleted_at"] = datetime.utcnow().isoformat()
        impact_summary = {
            "total_records_affected": (
                deletion_results["post_images_deleted"]
                + (1 if deletion_results["type_specific_deleted"] else 0)
                + (1 if deletion_results["base_post_deleted"] else 0)
            ),
            "images_unlinked": deletion_results["post_images_deleted"],
            "soft_deleted": soft_delete,
        }
        if post_type == "review":
            impact_summary["spot_rating_updated"] = not soft_delete
            impact_summary["spot_affected"] = spot_name
            impact_summary["rating_removed"] = rating
        else:
            impact_summary["list_affected"] = list_name

        action = "marked as deleted" if soft_delete else "deleted"
        return {
            "success": True,
            "message": f"{post_type.capitalize()} post {action} successfully",
            "data": {
                "deleted_post": deleted_post,
                "deletion_results": deletion_results,
                "impact_summary": impact_summary,
            },
        }, 200

    @staticmethod
    def link_images(post_id, data):
        """Attach registered images to a post in the given order."""
        image_ids = data.get("image_ids")
        if not isinstance(image_ids, list) or not image_ids:
            return error_response("image_ids must be a non-empty list", 400)
        if not all(is_positive_int(image_id) for image_id in image_ids):
            return error_response("image_ids must contain positive integers", 400)
        if len(set(image_ids)) != len(image_ids):
            return error_response("image_ids must not contain duplicates", 400)

        thumbnail_image_id = data.get("thumbnail_image_id")
        if thumbnail_image_id is None:
            thumbnail_image_id = image_ids[0]
        elif thumbnail_image_id not in image_ids:
            return error_response("thumbnail_image_id must be one of image_ids", 400)

        post = db.session.get(Post, post_id)
        if post is None:
            return error_response(f"Post with ID {post_id} does not exist", 404)

        found = {image.image_id for image in Image.query.filter(Image.image_id.in_(image_ids))}
        missing = [image_id for image_id in image_ids if image_id not in found]
        if missing:
            return error_response(f"Images not found: {', '.join(str(i) for i in missing)}", 404)

        already_linked = {
            row.image_id for row in db.session.query(PostImage.image_id).filter(PostImage.post_id == post_id)
        }
        duplicates = [image_id for image_id in image_ids if image_id in already_linked]
        if duplicates:
            return error_response(
                f"Images already linked to post {post_id}: {', '.join(str(i) for i in duplicates)}", 409
            )

        next_order = len(already_linked)
        with transaction(f"linking images to post {post_id}") as session:
            # One thumbnail per post
            session.query(PostImage).filter(PostImage.post_id == post_id).update(
                {PostImage.is_thumbnail: False}, synchronize_session=False
            )
            for position, image_id in enumerate(image_ids):
                session.add(
                    PostImage(
                        post_id=post_id,
                        image_id=image_id,
                        image_order=next_order + position,
                        is_thumbnail=image_id == thumbnail_image_id,
                    )
                )

        current_app.logger.info(f"Linked {len(image_ids)} images to post {post_id}")
        linked = (
            PostImage.query.options(joinedload(PostImage.image))
            .filter(PostImage.post_id == post_id)
            .order_by(PostImage.image_order)
            .all()
        )
        return {
            "success": True,
            "message": f"{len(image_ids)} images linked to post {post_id}",
            "data": {
                "post_id": post_id,
                "thumbnail_image_id": thumbnail_image_id,
                "images": [post_image.get_dict() for post_image in linked],
            },
        }, 201
