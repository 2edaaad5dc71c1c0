import threading

import pytest

from spots_client import ImageUploadService, UploadResult
from spots_client.models import Image


def image_body(image_id, name):
    return {
        'image_id': image_id,
        'image_name': name,
        'blob_url': f'https://test-bucket.s3.amazonaws.com/images/{image_id}',
        'content_type': 'image/jpeg',
        'file_size': 4,
    }


@pytest.fixture
def photos(tmp_path):
    paths = []
    for name in ('one.jpg', 'two.png', 'three.jpg'):
        path = tmp_path / name
        path.write_bytes(b'data')
        paths.append(str(path))
    return paths


class TestUploadBatch:
    """Test cases for concurrent uploads."""

    def test_results_keep_input_order(self, upload_service, fake_session, make_response, photos):
        lock = threading.Lock()
        counter = {'n': 0}

        def upload(files, **_):
            with lock:
                counter['n'] += 1
                image_id = counter['n']
            name = files[0][1][0]
            return make_response(201, {'success': True, 'images': [image_body(image_id, name)]})

        fake_session.on('POST', '/api/images', upload)
        progress = []

        results = upload_service.upload_batch(photos, on_progress=lambda done, total: progress.append((done, total)))

        assert [result.image.image_name for result in results] == ['one.jpg', 'two.png', 'three.jpg']
        assert all(result.is_successful for result in results)
        assert sorted(progress) == [(1, 3), (2, 3), (3, 3)]

    def test_failure_does_not_cancel_others(self, upload_service, fake_session, make_response, photos, tmp_path):
        def upload(files, **_):
            name = files[0][1][0]
            if name == 'two.png':
                return make_response(422, {'success': False, 'error': 'Submitted an empty file'})
            return make_response(201, {'success': True, 'images': [image_body(1, name)]})

        fake_session.on('POST', '/api/images', upload)
        missing = str(tmp_path / 'missing.jpg')

        results = upload_service.upload_batch(photos + [missing])

        assert [result.is_successful for result in results] == [True, False, True, False]
        assert 'Submitted an empty file' in results[1].error
        assert results[3].file_path == missing
        assert results[3].image is None

    def test_empty_batch(self, upload_service, fake_session):
        assert upload_service.upload_batch([]) == []
        assert fake_session.calls == []

    def test_content_type_guessed(self, upload_service, fake_session, make_response, photos):
        fake_session.on('POST', '/api/images', make_response(201, {'success': True, 'images': [image_body(1, 'two.png')]}))

        upload_service.upload_single(photos[1])

        field, (name, _, content_type) = fake_session.calls[0]['files'][0]
        assert (field, name, content_type) == ('file', 'two.png', 'image/png')


class TestLinkImages:
    """Test cases for linking uploads to a post."""

    def test_links_successful_uploads(self, upload_service, fake_session, make_response):
        fake_session.on('POST', '/api/posts/5/images', make_response(201, {'success': True, 'data': {}}))
        results = [
            UploadResult('a.jpg', image=Image(image_id=1, image_name='a.jpg', blob_url='https://x/1')),
            UploadResult('b.jpg', error='Upload failed'),
            UploadResult('c.jpg', image=Image(image_id=3, image_name='c.jpg', blob_url='https://x/3')),
        ]

        assert upload_service.link_images_to_post(5, results, thumbnail_image_id=3) is True
        assert fake_session.calls[0]['json'] == {'image_ids': [1, 3], 'thumbnail_image_id': 3}

    def test_nothing_to_link(self, upload_service, fake_session):
        assert upload_service.link_images_to_post(5, [UploadResult('b.jpg', error='Upload failed')]) is False
        assert fake_session.calls == []

    def test_link_failure(self, upload_service, fake_session):
        results = [UploadResult('a.jpg', image=Image(image_id=1, image_name='a.jpg', blob_url='https://x/1'))]
        # No handler registered: the scripted backend answers 404
        assert upload_service.link_images_to_post(5, results) is False


class TestUploadAgainstApp:
    """Test cases for uploading through the app with storage mocked."""

    def test_upload_and_link(self, api_client, mock_boto3, photos, sample_user, sample_spot, post_factory):
        service = ImageUploadService(api_client)
        post = post_factory('review', sample_user, spot=sample_spot)

        image = service.upload_single(photos[0])

        assert image.image_name == 'one.jpg'
        assert image.file_size == 4
        assert mock_boto3.upload_fileobj.call_count == 1
        assert service.link_images_to_post(post.post_id, [UploadResult(photos[0], image=image)]) is True
        assert [linked.image_id for linked in post.images] == [image.image_id]
