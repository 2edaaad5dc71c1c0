import io
import uuid

import boto3
from botocore.exceptions import ClientError
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app.models import Image
from app.utils.responses import error_response
from app.utils.transactions import transaction

IMAGE_KEY_PREFIX = "images/"


def get_s3_client():
    """Get S3 client with proper configuration."""
    return boto3.client(
        "s3",
        aws_access_key_id=current_app.config.get("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=current_app.config.get("AWS_SECRET_ACCESS_KEY"),
        region_name=current_app.config.get("AWS_REGION", "us-east-1"),
    )


class ImageService:
    """Service class for storing uploaded files and registering them as images."""

    @staticmethod
    def upload_images(files):
        """Store each uploaded file in the bucket and insert an images row for it."""
        if not files:
            return error_response("No file included in request", 422)
        for file in files:
            # An empty file part is submitted without a filename
            if file.filename == "":
                return error_response("Submitted an empty file", 422)

        bucket = current_app.config.get("S3_BUCKET_NAME")
        s3_client = get_s3_client()
        images = []
        uploaded_keys = []
        try:
            for file in files:
                s3_key = IMAGE_KEY_PREFIX + str(uuid.uuid4())
                contents = file.read()
                s3_client.upload_fileobj(
                    io.BytesIO(contents),
                    bucket,
                    s3_key,
                    ExtraArgs={"ACL": "public-read", "ContentType": file.content_type},
                )
                uploaded_keys.append(s3_key)
                current_app.logger.info(f"Uploaded {file.filename} to s3://{bucket}/{s3_key}")
                images.append(
                    Image(
                        image_name=file.filename,
                        blob_url=f"https://{bucket}.s3.amazonaws.com/{s3_key}",
                        content_type=file.content_type,
                        file_size=len(contents),
                    )
                )
        except ClientError:
            current_app.logger.error(f"Upload to s3://{bucket} failed", exc_info=True)
            ImageService.delete_objects(s3_client, bucket, uploaded_keys)
            return error_response("Failed to store uploaded image", 500)

        try:
            with transaction("registering uploaded images") as session:
                session.add_all(images)
        except SQLAlchemyError:
            ImageService.delete_objects(s3_client, bucket, uploaded_keys)
            raise

        return {
            "success": True,
            "message": f"{len(images)} images uploaded successfully",
            "images": [image.get_dict() for image in images],
        }, 201

    @staticmethod
    def delete_objects(s3_client, bucket, keys):
        """Remove stored objects that never got an images row."""
        for key in keys:
            try:
                s3_client.delete_object(Bucket=bucket, Key=key)
            except ClientError:
                current_app.logger.warning(f"Could not delete orphaned object s3://{bucket}/{key}")
