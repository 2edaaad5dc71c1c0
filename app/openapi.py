from apispec import APISpec
from apispec.ext.marshmallow import MarshmallowPlugin
from apispec_webframeworks.flask import FlaskPlugin
from marshmallow import Schema, fields

DOCUMENTED_BLUEPRINTS = ("spots", "lists", "posts", "images", "users")


# Reference your schemas definitions
class ErrorSchema(Schema):
    success = fields.Bool()
    error = fields.Str()
    message = fields.Str()
    details = fields.Str()


class PaginationSchema(Schema):
    page = fields.Int()
    limit = fields.Int()
    total = fields.Int()
    total_pages = fields.Int()
    has_next = fields.Bool()
    has_previous = fields.Bool()


class SpotStatisticsSchema(Schema):
    total_reviews = fields.Int()
    average_rating = fields.Float()
    times_added_to_lists = fields.Int()
    reviews_last_30_days = fields.Int()


class SpotSchema(Schema):
    spot_id = fields.Int()
    spot_name = fields.Str()
    country = fields.Str()
    city = fields.Str()
    category = fields.Str()
    description = fields.Str(allow_none=True)
    location = fields.Str(metadata={"description": "City and country joined by a comma"})
    created_date = fields.Str()
    spot_image_id = fields.Int(allow_none=True)
    spot_image_url = fields.Str(allow_none=True)
    spot_image_name = fields.Str(allow_none=True)
    statistics = fields.Nested(SpotStatisticsSchema())


class SpotCreateSchema(Schema):
    spot_name = fields.Str(required=True)
    country = fields.Str(required=True)
    city = fields.Str(required=True)
    category = fields.Str(required=True)
    description = fields.Str()
    spot_image_id = fields.Int()


class SpotCreatedResponseSchema(Schema):
    success = fields.Bool()
    spot_id = fields.Int()
    message = fields.Str()
    data = fields.Nested(SpotSchema())


class SpotResponseSchema(Schema):
    success = fields.Bool()
    spot = fields.Nested(SpotSchema())


class SpotListResponseSchema(Schema):
    success = fields.Bool()
    spots = fields.List(fields.Nested(SpotSchema()))
    pagination = fields.Nested(PaginationSchema())
    filters_applied = fields.Dict()
    query_info = fields.Dict()


class ListSchema(Schema):
    list_id = fields.Int()
    list_name = fields.Str()
    is_public = fields.Bool()


class ListCreateSchema(Schema):
    list_name = fields.Str(required=True)
    is_public = fields.Bool()


class ListCreatedResponseSchema(Schema):
    success = fields.Bool()
    list_id = fields.Int()
    message = fields.Str()
    data = fields.Nested(ListSchema())


class ListSpotCreateSchema(Schema):
    spot_id = fields.Int(required=True)
    list_thumbnail_id = fields.Int()


class ListInfoSchema(Schema):
    list_id = fields.Int()
    list_name = fields.Str()
    is_public = fields.Bool()
    total_spots = fields.Int()
    spots_with_thumbnails = fields.Int()
    first_spot_added = fields.Str(allow_none=True)
    last_spot_added = fields.Str(allow_none=True)


class ListContentsResponseSchema(Schema):
    success = fields.Bool()
    list_info = fields.Nested(ListInfoSchema())
    spots = fields.List(fields.Dict())
    query_info = fields.Dict()


class PostCreateSchema(Schema):
    type = fields.Str(required=True, metadata={"description": "One of review, community or list"})
    user_id = fields.Int(required=True)
    description = fields.Str()
    spot_id = fields.Int(metadata={"description": "Required for review posts"})
    rating = fields.Int(metadata={"description": "1 to 5, required for review posts"})
    title = fields.Str(metadata={"description": "Required for community and list posts"})
    list_id = fields.Int(metadata={"description": "Required for community and list posts"})


class PostSchema(Schema):
    post_id = fields.Int()
    type = fields.Str()
    description = fields.Str(allow_none=True)
    user_id = fields.Int()
    created_date = fields.Str()
    spot_id = fields.Int()
    rating = fields.Int()
    title = fields.Str()
    list_id = fields.Int()
    user = fields.Dict()
    spot = fields.Dict()
    list = fields.Dict()
    images = fields.List(fields.Dict())


class PostCreatedResponseSchema(Schema):
    success = fields.Bool()
    post_id = fields.Int()
    message = fields.Str()
    data = fields.Nested(PostSchema())


class PostPaginationSchema(Schema):
    total = fields.Int()
    page = fields.Int()
    limit = fields.Int()
    hasMore = fields.Bool()


class PostListResponseSchema(Schema):
    success = fields.Bool()
    posts = fields.List(fields.Nested(PostSchema()))
    pagination = fields.Nested(PostPaginationSchema())


class PostImagesLinkSchema(Schema):
    image_ids = fields.List(fields.Int(), required=True)
    thumbnail_image_id = fields.Int()


class ImageSchema(Schema):
    image_id = fields.Int()
    image_name = fields.Str()
    blob_url = fields.Str()
    content_type = fields.Str()
    file_size = fields.Int()
    created_date = fields.Str()


class ImageUploadRequestSchema(Schema):
    file = fields.Raw(metadata={"type": "string", "format": "binary"})


class ImageUploadResponseSchema(Schema):
    success = fields.Bool()
    message = fields.Str()
    images = fields.List(fields.Nested(ImageSchema()))


class UserSyncSchema(Schema):
    firebase_uid = fields.Str(required=True)
    email = fields.Str(required=True)
    display_name = fields.Str()
    photo_url = fields.Str()
    provider = fields.Str()


class UserSyncResponseSchema(Schema):
    success = fields.Bool()
    user_id = fields.Int()
    action = fields.Str(metadata={"description": "Either 'created' or 'updated'"})
    message = fields.Str()
    user_data = fields.Dict()


def build_spec(app):
    """Build the OpenAPI document from the YAML blocks of the API views."""
    spec = APISpec(
        title='Travel Spots API',
        version='1.0.0',
        openapi_version="3.0.2",
        info=dict(
            description='API for spots, lists, posts, images and users'
        ),
        plugins=[
            FlaskPlugin(), MarshmallowPlugin()
        ]
    )

    for endpoint, view in app.view_functions.items():
        if endpoint.split('.')[0] not in DOCUMENTED_BLUEPRINTS:
            continue
        if not view.__doc__ or '---' not in view.__doc__:
            continue
        spec.path(view=view, app=app)

    return spec
