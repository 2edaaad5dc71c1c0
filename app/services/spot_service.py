import math
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy import func, or_
from sqlalchemy.orm import joinedload

from app.extensions import cache, db
from app.models import Image, ListSpot, Post, ReviewPost, Spot
from app.utils.responses import error_response
from app.utils.transactions import transaction
from app.utils.validators import (
    is_positive_int,
    parse_bool_param,
    parse_int_param,
    validate_choice,
    validate_lengths,
    validate_required_fields,
)


class SpotService:
    """Service class for spot business logic."""

    REQUIRED_FIELDS = ("spot_name", "country", "city", "category")
    FIELD_LIMITS = {
        "spot_name": 55,
        "country": 30,
        "city": 35,
        "category": 30,
        "description": 500,
    }
    ORDER_BY_OPTIONS = ("created_date", "spot_name", "city", "category", "country")
    ORDER_OPTIONS = ("asc", "desc")

    @staticmethod
    def create_spot(data):
        """Validate and insert a new spot."""
        is_valid, message = validate_required_fields(data, SpotService.REQUIRED_FIELDS)
        if not is_valid:
            return error_response(message, 400)

        is_valid, message = validate_lengths(data, SpotService.FIELD_LIMITS)
        if not is_valid:
            return error_response(message, 400)

        spot_image_id = data.get("spot_image_id")
        if spot_image_id is not None:
            if not is_positive_int(spot_image_id):
                return error_response("spot_image_id must be a positive integer", 400)
            if db.session.get(Image, spot_image_id) is None:
                return error_response(f"Image with ID {spot_image_id} does not exist", 400)

        spot_name = data["spot_name"]
        city = data["city"]
        country = data["country"]

        existing = Spot.query.filter_by(spot_name=spot_name, city=city, country=country).first()
        if existing:
            return error_response(
                f'A spot named "{spot_name}" already exists in {city}, {country}',
                409,
                existing_spot_id=existing.spot_id,
            )

        spot = Spot(
            spot_name=spot_name,
            country=country,
            city=city,
            category=data["category"],
            description=data.get("description") or None,
            spot_image_id=spot_image_id,
        )
        with transaction("creating spot") as session:
            session.add(spot)

        # Listings are cached by query string
        cache.clear()
        current_app.logger.info(f"Created spot {spot.spot_id}")

        return {
            "success": True,
            "spot_id": spot.spot_id,
            "message": "Spot created successfully",
            "data": spot.get_dict(include_image=False),
        }, 201

    @staticmethod
    def get_spots(args):
        """Paginated, filtered and ordered spot listing."""
        page = parse_int_param(args.get("page"), 1)
        max_page_size = current_app.config.get("API_MAX_PAGE_SIZE", 100)
        default_page_size = current_app.config.get("API_DEFAULT_PAGE_SIZE", 20)
        limit = min(parse_int_param(args.get("limit"), default_page_size), max_page_size)
        category = args.get("category")
        country = args.get("country")
        city = args.get("city")
        search = args.get("search")
        order_by = args.get("orderBy") or "created_date"
        order = args.get("order") or "desc"
        include_images = parse_bool_param(args.get("includeImages"), True)
        include_stats = parse_bool_param(args.get("includeStats"), False)

        is_valid, message = validate_choice(order_by, "orderBy", SpotService.ORDER_BY_OPTIONS)
        if not is_valid:
            return error_response(message, 400)
        is_valid, message = validate_choice(order, "order", SpotService.ORDER_OPTIONS)
        if not is_valid:
            return error_response(message, 400)

        query = Spot.query
        if category:
            query = query.filter(Spot.category == category)
        if country:
            query = query.filter(Spot.country == country)
        if city:
            query = query.filter(Spot.city == city)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Spot.spot_name.ilike(pattern),
                    Spot.description.ilike(pattern),
                    Spot.city.ilike(pattern),
                    Spot.category.ilike(pattern),
                )
            )

        total = query.count()

        if include_images:
            query = query.options(joinedload(Spot.image))
        spots = (
            query.order_by(*SpotService._ordering(order_by, order))
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        spot_dicts = [spot.get_dict(include_image=include_images) for spot in spots]
        if include_stats and spot_dicts:
            stats = SpotService.get_bulk_statistics([spot.spot_id for spot in spots])
            for spot_dict in spot_dicts:
                spot_dict["statistics"] = stats[spot_dict["spot_id"]]

        total_pages = math.ceil(total / limit)
        current_app.logger.info(f"Listed {len(spot_dicts)} of {total} spots (page {page})")

        return {
            "success": True,
            "spots": spot_dicts,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": total_pages,
                "has_next": page < total_pages,
                "has_previous": page > 1,
            },
            "filters_applied": {
                "category": category or None,
                "country": country or None,
                "city": city or None,
                "search": search or None,
            },
            "query_info": {
                "ordered_by": order_by,
                "order_direction": order,
                "includes_images": include_images,
                "includes_stats": include_stats,
            },
        }, 200

    @staticmethod
    def get_spot(spot_id, args):
        """Fetch one spot, optionally with its statistics."""
        include_images = parse_bool_param(args.get("includeImages"), True)
        include_stats = parse_bool_param(args.get("includeStats"), False)

        spot = db.session.get(Spot, spot_id)
        if spot is None:
            return error_response(f"Spot with ID {spot_id} not found", 404)

        spot_dict = spot.get_dict(include_image=include_images)
        if include_stats:
            spot_dict["statistics"] = SpotService.get_bulk_statistics([spot_id])[spot_id]

        return {"success": True, "spot": spot_dict}, 200

    @staticmethod
    def get_bulk_statistics(spot_ids):
        """Review and list statistics for several spots, keyed by spot id."""
        stats = {
            spot_id: {
                "total_reviews": 0,
                "average_rating": 0,
                "times_added_to_lists": 0,
                "reviews_last_30_days": 0,
            }
            for spot_id in spot_ids
        }

        review_rows = (
            db.session.query(
                ReviewPost.spot_id,
                func.count(ReviewPost.post_id),
                func.avg(ReviewPost.rating),
            )
            .join(Post, Post.post_id == ReviewPost.post_id)
            .filter(ReviewPost.spot_id.in_(spot_ids))
            .group_by(ReviewPost.spot_id)
            .all()
        )
        for spot_id, total_reviews, average_rating in review_rows:
            stats[spot_id]["total_reviews"] = total_reviews
            stats[spot_id]["average_rating"] = round(float(average_rating or 0), 1)

        list_rows = (
            db.session.query(ListSpot.spot_id, func.count(ListSpot.list_id))
            .filter(ListSpot.spot_id.in_(spot_ids))
            .group_by(ListSpot.spot_id)
            .all()
        )
        for spot_id, times_added in list_rows:
            stats[spot_id]["times_added_to_lists"] = times_added

        since = datetime.utcnow() - timedelta(days=30)
        recent_rows = (
            db.session.query(ReviewPost.spot_id, func.count(ReviewPost.post_id))
            .join(Post, Post.post_id == ReviewPost.post_id)
            .filter(ReviewPost.spot_id.in_(spot_ids), Post.created_date >= since)
            .group_by(ReviewPost.spot_id)
            .all()
        )
        for spot_id, recent in recent_rows:
            stats[spot_id]["reviews_last_30_days"] = recent

        return stats

    @staticmethod
    def _ordering(order_by, order):
        column = getattr(Spot, order_by)
        primary = column.asc() if order == "asc" else column.desc()
        if order_by in ("city", "category"):
            return [primary, Spot.spot_name.asc()]
        if order_by == "country":
            return [primary, Spot.city.asc(), Spot.spot_name.asc()]
        if order_by == "created_date":
            # Ties on creation time fall back to insertion order
            tiebreak = Spot.spot_id.asc() if order == "asc" else Spot.spot_id.desc()
            return [primary, tiebreak]
        return [primary]
