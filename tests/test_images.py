import io
from unittest.mock import patch

from botocore.exceptions import ClientError
from sqlalchemy.exc import OperationalError

from app.models import Image


class TestUploadImages:
    """Test cases for POST /api/images."""

    def test_upload_images(self, client, mock_boto3):
        response = client.post(
            '/api/images',
            data={'file': [
                (io.BytesIO(b'first image'), 'beach.jpg', 'image/jpeg'),
                (io.BytesIO(b'second'), 'tower.png', 'image/png'),
            ]},
            content_type='multipart/form-data',
        )

        assert response.status_code == 201
        images = response.get_json()['images']
        assert [image['image_name'] for image in images] == ['beach.jpg', 'tower.png']
        assert images[0]['file_size'] == len(b'first image')
        assert images[0]['blob_url'].startswith('https://test-bucket.s3.amazonaws.com/images/')
        assert Image.query.count() == 2

        assert mock_boto3.upload_fileobj.call_count == 2
        _, bucket, key = mock_boto3.upload_fileobj.call_args_list[1][0]
        assert bucket == 'test-bucket'
        assert key.startswith('images/')
        assert mock_boto3.upload_fileobj.call_args_list[1][1]['ExtraArgs'] == {
            'ACL': 'public-read',
            'ContentType': 'image/png',
        }

    def test_no_file(self, client, mock_boto3):
        response = client.post('/api/images', data={}, content_type='multipart/form-data')

        assert response.status_code == 422
        assert response.get_json()['error'] == 'No file included in request'
        mock_boto3.upload_fileobj.assert_not_called()

    def test_empty_file(self, client, mock_boto3):
        response = client.post(
            '/api/images',
            data={'file': (io.BytesIO(b''), '')},
            content_type='multipart/form-data',
        )

        assert response.status_code == 422
        assert response.get_json()['error'] == 'Submitted an empty file'

    def test_storage_failure(self, client, mock_boto3):
        mock_boto3.upload_fileobj.side_effect = RuntimeError('bucket unavailable')

        response = client.post(
            '/api/images',
            data={'file': (io.BytesIO(b'data'), 'beach.jpg', 'image/jpeg')},
            content_type='multipart/form-data',
        )

        assert response.status_code == 500
        assert Image.query.count() == 0

    def test_storage_error_removes_stored_objects(self, client, mock_boto3):
        mock_boto3.upload_fileobj.side_effect = [
            None,
            ClientError({'Error': {'Code': 'AccessDenied', 'Message': 'Access Denied'}}, 'PutObject'),
        ]

        response = client.post(
            '/api/images',
            data={'file': [
                (io.BytesIO(b'first'), 'beach.jpg', 'image/jpeg'),
                (io.BytesIO(b'second'), 'tower.jpg', 'image/jpeg'),
            ]},
            content_type='multipart/form-data',
        )

        assert response.status_code == 500
        assert response.get_json()['error'] == 'Failed to store uploaded image'
        first_key = mock_boto3.upload_fileobj.call_args_list[0][0][2]
        mock_boto3.delete_object.assert_called_once_with(Bucket='test-bucket', Key=first_key)
        assert Image.query.count() == 0

    def test_database_error_removes_stored_objects(self, client, mock_boto3):
        with patch(
            'app.services.image_service.transaction',
            side_effect=OperationalError('INSERT INTO images', {}, Exception('disk I/O error')),
        ):
            response = client.post(
                '/api/images',
                data={'file': (io.BytesIO(b'data'), 'beach.jpg', 'image/jpeg')},
                content_type='multipart/form-data',
            )

        assert response.status_code == 500
        stored_key = mock_boto3.upload_fileobj.call_args[0][2]
        mock_boto3.delete_object.assert_called_once_with(Bucket='test-bucket', Key=stored_key)
