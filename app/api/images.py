from flask import Blueprint, jsonify, request

from app.services.image_service import ImageService

bp = Blueprint('images', __name__, url_prefix='/api/images')


@bp.route('', methods=['POST'])
def upload_images():
    """Upload Images
    ---
    post:
        summary: Upload one or more images
        description: Each file part is stored in the bucket and registered as an image
        requestBody:
            content:
              multipart/form-data:
                schema: ImageUploadRequestSchema
        responses:
            201:
                description: Returns the registered images
                content:
                  application/json:
                    schema: ImageUploadResponseSchema
            422:
                description: No file part or an empty file
                content:
                  application/json:
                    schema: ErrorSchema
    """
    result, status_code = ImageService.upload_images(request.files.getlist('file'))
    return jsonify(result), status_code
