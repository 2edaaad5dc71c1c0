from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from app.models import CommunityPost, Post, PostImage, ReviewPost
from app.services.post_service import PostService


class TestCreatePost:
    """Test cases for POST /api/posts."""

    def test_create_review_post(self, client, sample_user, sample_spot):
        response = client.post('/api/posts', json={
            'type': 'review',
            'user_id': sample_user.user_id,
            'spot_id': sample_spot.spot_id,
            'rating': 5,
            'description': 'Worth the queue',
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['post_id'] == data['data']['post_id']
        assert data['data']['rating'] == 5
        assert data['data']['created_date'] is not None
        assert ReviewPost.query.filter_by(post_id=data['post_id']).count() == 1

    def test_create_community_post(self, client, sample_user, list_factory):
        spot_list = list_factory(is_public=False)

        response = client.post('/api/posts', json={
            'type': 'community',
            'user_id': sample_user.user_id,
            'title': 'My Trip',
            'list_id': spot_list.list_id,
        })

        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['title'] == 'My Trip'
        assert data['description'] is None
        assert CommunityPost.query.filter_by(list_id=spot_list.list_id).count() == 1

    def test_review_refreshes_cached_statistics(self, client, sample_user, sample_spot):
        url = '/api/spots?includeStats=true'
        assert client.get(url).get_json()['spots'][0]['statistics']['total_reviews'] == 0

        client.post('/api/posts', json={
            'type': 'review',
            'user_id': sample_user.user_id,
            'spot_id': sample_spot.spot_id,
            'rating': 3,
        })

        assert client.get(url).get_json()['spots'][0]['statistics']['total_reviews'] == 1

    def test_missing_type(self, client):
        response = client.post('/api/posts', json={'description': 'hello'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'type and user_id are required fields'

    def test_invalid_type(self, client, sample_user):
        response = client.post('/api/posts', json={'type': 'story', 'user_id': sample_user.user_id})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid post type. Must be one of: review, community, list'

    def test_rating_out_of_range(self, client, sample_user, sample_spot):
        response = client.post('/api/posts', json={
            'type': 'review',
            'user_id': sample_user.user_id,
            'spot_id': sample_spot.spot_id,
            'rating': 6,
        })

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Rating must be between 1 and 5'

    def test_title_too_long(self, client, sample_user, list_factory):
        spot_list = list_factory()

        response = client.post('/api/posts', json={
            'type': 'list',
            'user_id': sample_user.user_id,
            'title': 'x' * 46,
            'list_id': spot_list.list_id,
        })

        assert response.status_code == 400
        assert response.get_json()['error'] == 'title must be 45 characters or less'

    def test_unknown_user(self, client, list_factory):
        spot_list = list_factory()

        response = client.post('/api/posts', json={
            'type': 'list',
            'user_id': 999,
            'title': 'Shared',
            'list_id': spot_list.list_id,
        })

        assert response.status_code == 404
        assert response.get_json()['error'] == 'User with ID 999 does not exist'

    def test_unknown_list(self, client, sample_user):
        response = client.post('/api/posts', json={
            'type': 'community',
            'user_id': sample_user.user_id,
            'title': 'Shared',
            'list_id': 999,
        })
        assert response.status_code == 404

    def test_subtype_failure_leaves_no_base_row(self, client, sample_user, list_factory):
        spot_list = list_factory()

        with patch.object(
            PostService,
            '_build_detail',
            side_effect=OperationalError('INSERT INTO community_post', {}, Exception('disk I/O error')),
        ):
            response = client.post('/api/posts', json={
                'type': 'community',
                'user_id': sample_user.user_id,
                'title': 'My Trip',
                'list_id': spot_list.list_id,
            })

        assert response.status_code == 500
        assert Post.query.count() == 0


class TestGetPosts:
    """Test cases for GET /api/posts."""

    def test_newest_first(self, client, sample_user, sample_spot, list_factory, post_factory):
        first = post_factory('review', sample_user, spot=sample_spot)
        second = post_factory('community', sample_user, spot_list=list_factory())

        data = client.get('/api/posts').get_json()

        assert [post['post_id'] for post in data['posts']] == [second.post_id, first.post_id]
        assert data['posts'][0]['title'] == 'Test Post'
        assert data['posts'][1]['spot']['spot_name'] == 'Belem Tower'
        assert data['pagination'] == {'total': 2, 'page': 1, 'limit': 20, 'hasMore': False}

    def test_filters(self, client, user_factory, sample_spot, list_factory, post_factory):
        ana, rui = user_factory(), user_factory()
        post_factory('review', ana, spot=sample_spot)
        post_factory('community', ana, spot_list=list_factory())
        post_factory('review', rui, spot=sample_spot)

        data = client.get(f'/api/posts?userId={ana.user_id}&type=review').get_json()

        assert data['pagination']['total'] == 1
        assert data['posts'][0]['user']['user_id'] == ana.user_id

    def test_has_more(self, client, sample_user, sample_spot, post_factory):
        for _ in range(3):
            post_factory('review', sample_user, spot=sample_spot)

        data = client.get('/api/posts?limit=2').get_json()

        assert len(data['posts']) == 2
        assert data['pagination']['hasMore'] is True

    def test_invalid_type(self, client):
        assert client.get('/api/posts?type=story').status_code == 400

    def test_invalid_user_id(self, client):
        response = client.get('/api/posts?userId=abc')

        assert response.status_code == 400
        assert response.get_json()['error'] == 'userId must be a positive integer'


class TestGetPost:
    """Test cases for GET /api/posts/<id>."""

    def test_detailed_author(self, client, sample_user, sample_spot, post_factory):
        post = post_factory('review', sample_user, spot=sample_spot)

        data = client.get(f'/api/posts/{post.post_id}').get_json()

        assert data['post']['user']['username'] == 'anatraveler'
        assert 'member_since' in data['post']['user']

    def test_not_found(self, client):
        response = client.get('/api/posts/999')

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Post not found'


class TestDeletePost:
    """Test cases for DELETE /api/posts/<id>."""

    def test_hard_delete(self, client, sample_user, list_factory, post_factory, image_factory, db_session):
        post = post_factory('community', sample_user, spot_list=list_factory(list_name='Trip - Spots'))
        image = image_factory()
        db_session.add(PostImage(post_id=post.post_id, image_id=image.image_id, image_order=0, is_thumbnail=True))
        db_session.commit()
        post_id = post.post_id

        response = client.delete(f'/api/posts/{post_id}')

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['deletion_results'] == {
            'post_images_deleted': 1,
            'type_specific_deleted': True,
            'base_post_deleted': True,
            'soft_deleted': False,
        }
        assert data['impact_summary']['list_affected'] == 'Trip - Spots'
        assert Post.query.count() == 0
        assert CommunityPost.query.count() == 0
        assert PostImage.query.count() == 0

    def test_soft_delete(self, client, sample_user, sample_spot, post_factory, db_session):
        post = post_factory('review', sample_user, spot=sample_spot, description='Loved it')

        response = client.delete(f'/api/posts/{post.post_id}?softDelete=true')

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.get(Post, post.post_id).description == 'Loved it [DELETED]'
        assert ReviewPost.query.count() == 1

    def test_dry_run(self, client, sample_user, sample_spot, post_factory):
        post = post_factory('review', sample_user, spot=sample_spot, rating=4)

        data = client.delete(f'/api/posts/{post.post_id}?dryRun=true').get_json()

        assert data['dry_run'] is True
        assert data['would_delete']['deletion_impact']['review_impact']['rating_removed'] == 4
        assert Post.query.count() == 1

    def test_not_found(self, client):
        assert client.delete('/api/posts/999').status_code == 404


class TestLinkImages:
    """Test cases for POST /api/posts/<id>/images."""

    def test_link_images(self, client, sample_user, sample_spot, post_factory, image_factory):
        post = post_factory('review', sample_user, spot=sample_spot)
        first, second = image_factory(image_name='a.jpg'), image_factory(image_name='b.jpg')

        response = client.post(
            f'/api/posts/{post.post_id}/images',
            json={'image_ids': [second.image_id, first.image_id], 'thumbnail_image_id': first.image_id},
        )

        assert response.status_code == 201
        images = response.get_json()['data']['images']
        assert [image['image_name'] for image in images] == ['b.jpg', 'a.jpg']
        assert [image['is_thumbnail'] for image in images] == [False, True]

    def test_thumbnail_defaults_to_first(self, client, sample_user, sample_spot, post_factory, image_factory):
        post = post_factory('review', sample_user, spot=sample_spot)
        image = image_factory()

        data = client.post(f'/api/posts/{post.post_id}/images', json={'image_ids': [image.image_id]}).get_json()

        assert data['data']['thumbnail_image_id'] == image.image_id

    def test_appends_after_existing(self, client, sample_user, sample_spot, post_factory, image_factory):
        post = post_factory('review', sample_user, spot=sample_spot)
        first, second = image_factory(), image_factory()
        url = f'/api/posts/{post.post_id}/images'

        client.post(url, json={'image_ids': [first.image_id]})
        images = client.post(url, json={'image_ids': [second.image_id]}).get_json()['data']['images']

        assert [image['image_order'] for image in images] == [0, 1]
        assert [image['is_thumbnail'] for image in images] == [False, True]

    def test_already_linked(self, client, sample_user, sample_spot, post_factory, image_factory):
        post = post_factory('review', sample_user, spot=sample_spot)
        image = image_factory()
        url = f'/api/posts/{post.post_id}/images'

        client.post(url, json={'image_ids': [image.image_id]})
        response = client.post(url, json={'image_ids': [image.image_id]})

        assert response.status_code == 409

    def test_missing_image(self, client, sample_user, sample_spot, post_factory):
        post = post_factory('review', sample_user, spot=sample_spot)

        response = client.post(f'/api/posts/{post.post_id}/images', json={'image_ids': [77]})

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Images not found: 77'

    def test_invalid_ids(self, client, sample_user, sample_spot, post_factory):
        post = post_factory('review', sample_user, spot=sample_spot)
        url = f'/api/posts/{post.post_id}/images'

        assert client.post(url, json={'image_ids': []}).status_code == 400
        assert client.post(url, json={'image_ids': [1, 1]}).status_code == 400
        assert client.post(url, json={'image_ids': [1], 'thumbnail_image_id': 2}).status_code == 400
