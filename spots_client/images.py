import logging
import mimetypes
import os
from concurrent.futures import ThreadPoolExecutor, as_completed

from spots_client.constants import IMAGES_ENDPOINT, POSTS_ENDPOINT, UPLOAD_MAX_WORKERS
from spots_client.exceptions import ApiException
from spots_client.models import Image, UploadResult
from spots_client.validation import require_positive_id

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class ImageUploadService:
    """Uploads local image files and links them to posts."""

    def __init__(self, api_client, max_workers=UPLOAD_MAX_WORKERS):
        self.api = api_client
        self.max_workers = max_workers

    def upload_single(self, file_path):
        """Upload one file and return the registered Image."""
        content_type = mimetypes.guess_type(file_path)[0] or DEFAULT_CONTENT_TYPE
        with open(file_path, "rb") as f:
            response = self.api.upload(
                IMAGES_ENDPOINT,
                [("file", (os.path.basename(file_path), f, content_type))],
            )
        images = response.get("images") or []
        if not images:
            raise ApiException(f"Upload of {file_path} returned no image")
        return Image.from_dict(images[0])

    def _upload_result(self, file_path):
        try:
            return UploadResult(file_path=file_path, image=self.upload_single(file_path))
        except (ApiException, OSError) as e:
            logger.warning("Upload of %s failed: %s", file_path, e)
            return UploadResult(file_path=file_path, error=str(e))

    def upload_batch(self, file_paths, on_progress=None):
        """Upload files concurrently; results come back in input order.

        A failed upload yields a result with ``error`` set and does not stop
        the others. ``on_progress(completed, total)`` is called as each
        upload finishes.
        """
        file_paths = list(file_paths)
        total = len(file_paths)
        if not total:
            return []

        results = [None] * total
        with ThreadPoolExecutor(max_workers=min(self.max_workers, total)) as executor:
            futures = {executor.submit(self._upload_result, path): index for index, path in enumerate(file_paths)}
            for completed, future in enumerate(as_completed(futures), start=1):
                results[futures[future]] = future.result()
                if on_progress:
                    on_progress(completed, total)

        succeeded = sum(1 for result in results if result.is_successful)
        logger.info("Uploaded %d of %d images", succeeded, total)
        return results

    def link_images_to_post(self, post_id, results, thumbnail_image_id=None):
        """Link the successful uploads to a post. Returns False if nothing was linked."""
        require_positive_id(post_id, "post ID")
        image_ids = [result.image.image_id for result in results if result.is_successful]
        if not image_ids:
            return False

        body = {"image_ids": image_ids}
        if thumbnail_image_id is not None:
            body["thumbnail_image_id"] = thumbnail_image_id
        try:
            self.api.post(f"{POSTS_ENDPOINT}/{post_id}/images", body)
        except ApiException as e:
            logger.warning("Could not link images to post %s: %s", post_id, e)
            return False
        return True
