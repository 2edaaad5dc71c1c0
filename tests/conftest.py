from unittest.mock import MagicMock, patch
from urllib.parse import urlsplit

import pytest

from app import create_app, db
from app.config import TestingConfig
from app.models import (
    CommunityPost,
    Image,
    List,
    ListPost,
    ListSpot,
    Post,
    ReviewPost,
    Spot,
    User,
)
from spots_client import ApiClient, ImageUploadService, ListsService, PostsService, SpotsService, UserSyncService


class TestConfig(TestingConfig):
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    S3_BUCKET_NAME = 'test-bucket'
    AWS_ACCESS_KEY_ID = 'test-key'
    AWS_SECRET_ACCESS_KEY = 'test-secret'

    def __init__(self):
        # Always in-memory, regardless of TEST_DATABASE_URL
        pass


@pytest.fixture(scope='function')
def app():
    """A fresh app with an empty in-memory database for each test."""
    app = create_app(config_object=TestConfig())

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """The app's session; committed rows live until the app fixture drops the tables."""
    return db.session


class AdapterResponse:
    """The parts of requests.Response that ApiClient reads."""

    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code

    def json(self):
        body = self._response.get_json(silent=True)
        if body is None:
            raise ValueError("Response body is not JSON")
        return body


class FlaskTestSession:
    """requests-compatible session that routes client calls into the Flask test client."""

    def __init__(self, client):
        self.client = client
        self.calls = []

    def request(self, method, url, params=None, json=None, files=None, headers=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append((method, path))

        kwargs = {'query_string': params or {}, 'headers': headers}
        if files is not None:
            data = {}
            for field, (name, fileobj, content_type) in files:
                data.setdefault(field, []).append((fileobj, name, content_type))
            kwargs['data'] = data
            kwargs['content_type'] = 'multipart/form-data'
        elif json is not None:
            kwargs['json'] = json

        return AdapterResponse(self.client.open(path, method=method, **kwargs))


class FakeResponse:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


class FakeSession:
    """Scripted session: handlers are matched on (method, path) and may raise."""

    def __init__(self):
        self.handlers = {}
        self.calls = []

    def on(self, method, path, handler):
        self.handlers[(method, path)] = handler

    def request(self, method, url, params=None, json=None, files=None, headers=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append({'method': method, 'path': path, 'params': params, 'json': json, 'files': files})
        handler = self.handlers.get((method, path))
        if handler is None:
            return FakeResponse(404, {'success': False, 'error': f'No handler for {method} {path}'})
        result = handler(json=json, params=params, files=files) if callable(handler) else handler
        return result


@pytest.fixture
def api_session(client):
    return FlaskTestSession(client)


@pytest.fixture
def api_client(api_session):
    """A spots_client ApiClient talking to the test app."""
    return ApiClient('http://testserver', session=api_session)


@pytest.fixture
def lists_service(api_client):
    return ListsService(api_client)


@pytest.fixture
def posts_service(api_client, lists_service):
    return PostsService(api_client, lists_service)


@pytest.fixture
def spots_service(api_client):
    return SpotsService(api_client)


@pytest.fixture
def user_sync_service(api_client):
    return UserSyncService(api_client)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def fake_api(fake_session):
    return ApiClient('http://fake', session=fake_session)


@pytest.fixture
def upload_service(fake_api):
    return ImageUploadService(fake_api)


@pytest.fixture
def mock_boto3():
    """Mock AWS Boto3 services."""
    with patch('app.services.image_service.boto3') as mock:
        mock_client = MagicMock()
        mock.client.return_value = mock_client
        yield mock_client


# Test data factories
@pytest.fixture
def user_factory(db_session):
    """Factory for creating test users."""
    counter = {'n': 0}

    def _create_user(**kwargs):
        counter['n'] += 1
        defaults = {
            'firebase_uid': f'firebase-uid-{counter["n"]:04d}',
            'display_name': 'Test User',
            'username': f'testuser{counter["n"]}',
            'user_email': f'test{counter["n"]}@example.com',
        }
        defaults.update(kwargs)

        user = User(**defaults)
        db_session.add(user)
        db_session.commit()
        return user

    return _create_user


@pytest.fixture
def image_factory(db_session):
    """Factory for creating registered images."""
    def _create_image(**kwargs):
        defaults = {
            'image_name': 'beach.jpg',
            'blob_url': 'https://test-bucket.s3.amazonaws.com/images/beach',
            'content_type': 'image/jpeg',
            'file_size': 1024,
        }
        defaults.update(kwargs)

        image = Image(**defaults)
        db_session.add(image)
        db_session.commit()
        return image

    return _create_image


@pytest.fixture
def spot_factory(db_session):
    """Factory for creating test spots."""
    counter = {'n': 0}

    def _create_spot(**kwargs):
        counter['n'] += 1
        defaults = {
            'spot_name': f'Test Spot {counter["n"]}',
            'country': 'Portugal',
            'city': 'Lisbon',
            'category': 'Viewpoint',
            'description': 'Test spot description',
        }
        defaults.update(kwargs)

        spot = Spot(**defaults)
        db_session.add(spot)
        db_session.commit()
        return spot

    return _create_spot


@pytest.fixture
def list_factory(db_session):
    """Factory for creating lists, optionally filled with spots."""
    def _create_list(spots=(), **kwargs):
        defaults = {'list_name': 'Test List', 'is_public': True}
        defaults.update(kwargs)

        spot_list = List(**defaults)
        db_session.add(spot_list)
        db_session.flush()
        for spot in spots:
            db_session.add(ListSpot(list_id=spot_list.list_id, spot_id=spot.spot_id))
        db_session.commit()
        return spot_list

    return _create_list


@pytest.fixture
def post_factory(db_session):
    """Factory for creating a base post row with its subtype row."""
    def _create_post(post_type, user, description='Test post', **kwargs):
        post = Post(type=post_type, user_id=user.user_id, description=description)
        db_session.add(post)
        db_session.flush()
        if post_type == 'review':
            db_session.add(ReviewPost(post_id=post.post_id, spot_id=kwargs['spot'].spot_id, rating=kwargs.get('rating', 5)))
        else:
            model = CommunityPost if post_type == 'community' else ListPost
            db_session.add(model(post_id=post.post_id, title=kwargs.get('title', 'Test Post'), list_id=kwargs['spot_list'].list_id))
        db_session.commit()
        return post

    return _create_post


@pytest.fixture
def sample_user(user_factory):
    return user_factory(display_name='Ana Traveler', username='anatraveler')


@pytest.fixture
def sample_spot(spot_factory):
    return spot_factory(spot_name='Belem Tower', category='Monument')


@pytest.fixture
def make_response():
    """Build a scripted response for FakeSession handlers."""
    return FakeResponse
