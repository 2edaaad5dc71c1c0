from datetime import datetime

from flask import current_app
from sqlalchemy import func
from sqlalchemy.orm import joinedload

from app.extensions import db
from app.models import CommunityPost, Image, List, ListPost, ListSpot, Post, PostImage, Spot
from app.models.base import isoformat
from app.utils.responses import error_response
from app.utils.transactions import transaction
from app.utils.validators import is_positive_int, parse_bool_param, validate_choice

LIST_NAME_MAX_LENGTH = 45


class ListService:
    """Service class for lists and their spot associations."""

    CONTENTS_ORDER_BY_OPTIONS = ("added_date", "spot_name", "city", "category")
    ORDER_OPTIONS = ("asc", "desc")

    @staticmethod
    def create_list(data):
        """Create a list from a name and visibility flag."""
        list_name = data.get("list_name")
        if not list_name:
            return error_response("list_name is required", 400)
        if not isinstance(list_name, str):
            return error_response("list_name must be a string", 400)
        if not list_name.strip():
            return error_response("list_name cannot be empty or just whitespace", 400)
        if len(list_name) > LIST_NAME_MAX_LENGTH:
            return error_response(f"list_name must be {LIST_NAME_MAX_LENGTH} characters or less", 400)

        is_public = data.get("is_public")
        if is_public is None:
            is_public = True
        elif not isinstance(is_public, bool):
            return error_response("is_public must be a boolean (true or false)", 400)

        spot_list = List(list_name=list_name.strip(), is_public=is_public)
        with transaction("creating list") as session:
            session.add(spot_list)

        current_app.logger.info(f"Created list {spot_list.list_id} (public={is_public})")

        return {
            "success": True,
            "list_id": spot_list.list_id,
            "message": "List created successfully",
            "data": spot_list.get_dict(),
        }, 201

    @staticmethod
    def add_spot(list_id, data):
        """Associate a spot with a list, at most once per pair."""
        spot_id = data.get("spot_id")
        list_thumbnail_id = data.get("list_thumbnail_id")

        if spot_id is None:
            return error_response("spot_id is required", 400)
        if not is_positive_int(spot_id):
            return error_response("spot_id must be a positive integer", 400)
        if list_thumbnail_id is not None and not is_positive_int(list_thumbnail_id):
            return error_response("list_thumbnail_id must be a positive integer if provided", 400)

        spot_list = db.session.get(List, list_id)
        if spot_list is None:
            return error_response(f"List with ID {list_id} does not exist", 404)

        spot = db.session.get(Spot, spot_id)
        if spot is None:
            return error_response(f"Spot with ID {spot_id} does not exist", 404)

        if list_thumbnail_id is not None and db.session.get(Image, list_thumbnail_id) is None:
            return error_response(f"Image with ID {list_thumbnail_id} does not exist", 404)

        existing = db.session.get(ListSpot, (list_id, spot_id))
        if existing is not None:
            return error_response(
                f'Spot "{spot.spot_name}" is already in list "{spot_list.list_name}"',
                409,
                existing_association={
                    "list_id": list_id,
                    "spot_id": spot_id,
                    "added_date": isoformat(existing.created_date),
                },
            )

        association = ListSpot(list_id=list_id, spot_id=spot_id, list_thumbnail_id=list_thumbnail_id)
        with transaction("adding spot to list") as session:
            session.add(association)

        current_app.logger.info(f"Added spot {spot_id} to list {list_id}")

        data = association.get_dict()
        data["list_info"] = {
            "list_name": spot_list.list_name,
            "is_public": spot_list.is_public,
        }
        data["spot_info"] = {
            "spot_name": spot.spot_name,
            "location": spot.location,
        }
        return {
            "success": True,
            "message": f'Spot "{spot.spot_name}" added to list "{spot_list.list_name}" successfully',
            "data": data,
        }, 201

    @staticmethod
    def remove_spot(list_id, spot_id):
        """Remove a spot from a list."""
        spot_list = db.session.get(List, list_id)
        if spot_list is None:
            return error_response(f"List with ID {list_id} does not exist", 404)

        spot = db.session.get(Spot, spot_id)
        if spot is None:
            return error_response(f"Spot with ID {spot_id} does not exist", 404)

        association = db.session.get(ListSpot, (list_id, spot_id))
        if association is None:
            return error_response(
                f'Spot "{spot.spot_name}" is not in list "{spot_list.list_name}"',
                404,
                details="Cannot remove a spot that is not in the list",
                list_info={"list_id": list_id, "list_name": spot_list.list_name},
                spot_info={"spot_id": spot_id, "spot_name": spot.spot_name, "location": spot.location},
            )

        association_info = {
            "was_added_on": isoformat(association.created_date),
            "had_thumbnail": association.list_thumbnail_id is not None,
            "list_thumbnail_id": association.list_thumbnail_id,
        }

        with transaction("removing spot from list") as session:
            spots_before_removal = ListSpot.query.filter_by(list_id=list_id).count()
            session.delete(association)
            session.flush()
            remaining_spots, last_spot_added = (
                session.query(func.count(ListSpot.spot_id), func.max(ListSpot.created_date))
                .filter(ListSpot.list_id == list_id)
                .one()
            )

        current_app.logger.info(f"Removed spot {spot_id} from list {list_id}")

        return {
            "success": True,
            "message": f'Spot "{spot.spot_name}" removed from list "{spot_list.list_name}" successfully',
            "data": {
                "list_id": list_id,
                "spot_id": spot_id,
                "removed_at": datetime.utcnow().isoformat(),
                "association_info": association_info,
                "list_info": {
                    "list_name": spot_list.list_name,
                    "is_public": spot_list.is_public,
                    "spots_before_removal": spots_before_removal,
                    "remaining_spots": remaining_spots,
                    "last_spot_added": isoformat(last_spot_added),
                },
                "spot_info": {
                    "spot_name": spot.spot_name,
                    "location": spot.location,
                },
            },
        }, 200

    @staticmethod
    def get_list_contents(list_id, args):
        """Spots of a list with list-level statistics."""
        order_by = args.get("orderBy") or "added_date"
        order = args.get("order") or "desc"
        include_images = parse_bool_param(args.get("includeImages"), True)

        is_valid, message = validate_choice(order_by, "orderBy", ListService.CONTENTS_ORDER_BY_OPTIONS)
        if not is_valid:
            return error_response(message, 400)
        is_valid, message = validate_choice(order, "order", ListService.ORDER_OPTIONS)
        if not is_valid:
            return error_response(message, 400)

        spot_list = db.session.get(List, list_id)
        if spot_list is None:
            return error_response(f"List with ID {list_id} does not exist", 404)

        query = ListSpot.query.join(Spot, Spot.spot_id == ListSpot.spot_id).filter(ListSpot.list_id == list_id)
        if include_images:
            query = query.options(
                joinedload(ListSpot.thumbnail),
                joinedload(ListSpot.spot).joinedload(Spot.image),
            )
        else:
            query = query.options(joinedload(ListSpot.spot))
        associations = query.order_by(*ListService._contents_ordering(order_by, order)).all()

        total_spots, spots_with_thumbnails, first_spot_added, last_spot_added = (
            db.session.query(
                func.count(ListSpot.spot_id),
                func.count(ListSpot.list_thumbnail_id),
                func.min(ListSpot.created_date),
                func.max(ListSpot.created_date),
            )
            .filter(ListSpot.list_id == list_id)
            .one()
        )

        return {
            "success": True,
            "list_info": {
                "list_id": list_id,
                "list_name": spot_list.list_name,
                "is_public": spot_list.is_public,
                "total_spots": total_spots,
                "spots_with_thumbnails": spots_with_thumbnails,
                "first_spot_added": isoformat(first_spot_added),
                "last_spot_added": isoformat(last_spot_added),
            },
            "spots": [association.get_spot_entry(include_images) for association in associations],
            "query_info": {
                "ordered_by": order_by,
                "order_direction": order,
                "includes_images": include_images,
            },
        }, 200

    @staticmethod
    def assess_deletion(spot_list):
        """Counts and warnings describing what deleting a list would remove."""
        list_id = spot_list.list_id
        spot_count = ListSpot.query.filter_by(list_id=list_id).count()
        community_posts_count = CommunityPost.query.filter_by(list_id=list_id).count()
        list_posts_count = ListPost.query.filter_by(list_id=list_id).count()
        total_posts = community_posts_count + list_posts_count

        warnings = []
        if total_posts > 0:
            warnings.append(f"{total_posts} posts will be permanently deleted")
        if spot_count > 5:
            warnings.append(f"{spot_count} spot associations will be removed")
        if spot_list.is_public and total_posts > 0:
            warnings.append("Public posts will be deleted, affecting community visibility")

        return {
            "list_info": {
                "list_id": list_id,
                "list_name": spot_list.list_name,
                "is_public": spot_list.is_public,
                "spots_in_list": spot_count,
                "posts_referencing_list": total_posts,
            },
            "deletion_impact": {
                "list_spot_associations_to_delete": spot_count,
                "community_posts_to_delete": community_posts_count,
                "list_posts_to_delete": list_posts_count,
                "total_posts_to_delete": total_posts,
            },
            "warnings": warnings,
        }

    @staticmethod
    def delete_list(list_id, force=False, dry_run=False):
        """Delete a list and everything that depends on it."""
        spot_list = db.session.get(List, list_id)
        if spot_list is None:
            return error_response(f"List with ID {list_id} does not exist", 404)

        impact = ListService.assess_deletion(spot_list)
        total_posts = impact["deletion_impact"]["total_posts_to_delete"]

        if dry_run:
            return {
                "success": True,
                "message": "Dry run completed - no data was deleted",
                "dry_run": True,
                "would_delete": impact,
            }, 200

        if total_posts > 0 and not force:
            return error_response(
                "List cannot be deleted because it has associated posts",
                409,
                details=(
                    f"{total_posts} posts reference this list. "
                    "Use ?force=true to delete anyway, or delete the posts first."
                ),
                impact=impact,
                suggestion=f"DELETE /api/lists/{list_id}?force=true to force deletion",
            )

        list_name = spot_list.list_name
        was_public = spot_list.is_public
        with transaction(f"deleting list {list_id}") as session:
            deletion_results = ListService._delete_cascade(session, list_id)

        current_app.logger.info(f"Deleted list {list_id}: {deletion_results}")

        return {
            "success": True,
            "message": f'List "{list_name}" deleted successfully',
            "data": {
                "deleted_list": {
                    "list_id": list_id,
                    "list_name": list_name,
                    "was_public": was_public,
                    "deleted_at": datetime.utcnow().isoformat(),
                },
                "deletion_results": deletion_results,
                "impact_summary": {
                    "total_records_deleted": (
                        deletion_results["list_spot_associations_deleted"]
                        + deletion_results["post_images_deleted"]
                        + deletion_results["community_posts_deleted"]
                        + deletion_results["list_posts_deleted"]
                        + deletion_results["base_posts_deleted"]
                        + (1 if deletion_results["list_deleted"] else 0)
                    ),
                    "spots_removed_from_list": deletion_results["list_spot_associations_deleted"],
                    "posts_deleted": (
                        deletion_results["community_posts_deleted"] + deletion_results["list_posts_deleted"]
                    ),
                    "operation_forced": force,
                },
            },
        }, 200

    @staticmethod
    def _delete_cascade(session, list_id):
        """Ordered deletes inside the caller's transaction."""
        community_post_ids = [
            row.post_id for row in session.query(CommunityPost.post_id).filter_by(list_id=list_id)
        ]
        list_post_ids = [row.post_id for row in session.query(ListPost.post_id).filter_by(list_id=list_id)]
        post_ids = community_post_ids + list_post_ids

        results = {
            "list_spot_associations_deleted": 0,
            "post_images_deleted": 0,
            "community_posts_deleted": 0,
            "list_posts_deleted": 0,
            "base_posts_deleted": 0,
            "list_deleted": False,
        }

        results["list_spot_associations_deleted"] = (
            session.query(ListSpot).filter(ListSpot.list_id == list_id).delete(synchronize_session=False)
        )
        if post_ids:
            results["post_images_deleted"] = (
                session.query(PostImage).filter(PostImage.post_id.in_(post_ids)).delete(synchronize_session=False)
            )
            results["community_posts_deleted"] = (
                session.query(CommunityPost)
                .filter(CommunityPost.list_id == list_id)
                .delete(synchronize_session=False)
            )
            results["list_posts_deleted"] = (
                session.query(ListPost).filter(ListPost.list_id == list_id).delete(synchronize_session=False)
            )
            results["base_posts_deleted"] = (
                session.query(Post).filter(Post.post_id.in_(post_ids)).delete(synchronize_session=False)
            )
        results["list_deleted"] = (
            session.query(List).filter(List.list_id == list_id).delete(synchronize_session=False) == 1
        )
        session.expire_all()
        return results

    @staticmethod
    def _contents_ordering(order_by, order):
        if order_by == "added_date":
            primary = ListSpot.created_date
            tiebreak = ListSpot.spot_id
            if order == "asc":
                return [primary.asc(), tiebreak.asc()]
            return [primary.desc(), tiebreak.desc()]
        column = getattr(Spot, order_by)
        primary = column.asc() if order == "asc" else column.desc()
        if order_by in ("city", "category"):
            return [primary, Spot.spot_name.asc()]
        return [primary]
