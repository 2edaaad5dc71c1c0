from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from app import db
from app.models import CommunityPost, List, ListPost, ListSpot, Post, PostImage
from app.services.list_service import ListService


def row_counts():
    return {
        'lists': List.query.count(),
        'associations': ListSpot.query.count(),
        'posts': Post.query.count(),
        'community_posts': CommunityPost.query.count(),
        'list_posts': ListPost.query.count(),
        'post_images': PostImage.query.count(),
    }


def list_with_posts(list_factory, spot_factory, post_factory, user, image_factory=None):
    spot_list = list_factory(spots=[spot_factory(), spot_factory()], is_public=True)
    post_factory('community', user, spot_list=spot_list)
    post = post_factory('list', user, spot_list=spot_list)
    if image_factory:
        image = image_factory()
        db.session.add(PostImage(post_id=post.post_id, image_id=image.image_id, image_order=0, is_thumbnail=True))
        db.session.commit()
    return spot_list


class TestDeleteList:
    """Test cases for DELETE /api/lists/<id>."""

    def test_delete_empty_list(self, client, list_factory):
        spot_list = list_factory(list_name='Old Trip')

        response = client.delete(f'/api/lists/{spot_list.list_id}')

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['deleted_list']['list_name'] == 'Old Trip'
        assert data['deletion_results']['list_deleted'] is True
        assert data['impact_summary']['total_records_deleted'] == 1
        assert List.query.count() == 0

    def test_delete_list_with_spots_only(self, client, list_factory, spot_factory):
        spot_list = list_factory(spots=[spot_factory(), spot_factory()])

        response = client.delete(f'/api/lists/{spot_list.list_id}')

        assert response.status_code == 200
        assert response.get_json()['data']['impact_summary']['spots_removed_from_list'] == 2
        assert ListSpot.query.count() == 0

    def test_dry_run_does_not_mutate(self, client, list_factory, spot_factory, post_factory, sample_user):
        spot_list = list_with_posts(list_factory, spot_factory, post_factory, sample_user)
        before = row_counts()

        response = client.delete(f'/api/lists/{spot_list.list_id}?dryRun=true')

        assert response.status_code == 200
        data = response.get_json()
        assert data['dry_run'] is True
        assert data['would_delete']['deletion_impact'] == {
            'list_spot_associations_to_delete': 2,
            'community_posts_to_delete': 1,
            'list_posts_to_delete': 1,
            'total_posts_to_delete': 2,
        }
        assert row_counts() == before

    def test_posts_block_deletion_without_force(self, client, list_factory, spot_factory, post_factory, sample_user):
        spot_list = list_with_posts(list_factory, spot_factory, post_factory, sample_user)
        before = row_counts()

        response = client.delete(f'/api/lists/{spot_list.list_id}')

        assert response.status_code == 409
        data = response.get_json()
        assert '?force=true' in data['suggestion']
        assert data['impact']['warnings'] == [
            '2 posts will be permanently deleted',
            'Public posts will be deleted, affecting community visibility',
        ]
        assert row_counts() == before

    def test_forced_cascade(self, client, list_factory, spot_factory, post_factory, image_factory, sample_user):
        spot_list = list_with_posts(list_factory, spot_factory, post_factory, sample_user, image_factory)
        other_list = list_factory(spots=[spot_factory()])
        post_factory('community', sample_user, spot_list=other_list)
        list_id = spot_list.list_id

        response = client.delete(f'/api/lists/{list_id}?force=true')

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['deletion_results'] == {
            'list_spot_associations_deleted': 2,
            'post_images_deleted': 1,
            'community_posts_deleted': 1,
            'list_posts_deleted': 1,
            'base_posts_deleted': 2,
            'list_deleted': True,
        }
        assert data['impact_summary']['total_records_deleted'] == 8
        assert data['impact_summary']['posts_deleted'] == 2
        assert data['impact_summary']['operation_forced'] is True

        assert ListSpot.query.filter_by(list_id=list_id).count() == 0
        assert CommunityPost.query.filter_by(list_id=list_id).count() == 0
        assert ListPost.query.filter_by(list_id=list_id).count() == 0
        assert PostImage.query.count() == 0
        # Unrelated rows survive
        assert Post.query.count() == 1
        assert ListSpot.query.filter_by(list_id=other_list.list_id).count() == 1

    def test_cascade_rolls_back_on_error(self, client, list_factory, spot_factory, post_factory, sample_user):
        spot_list = list_with_posts(list_factory, spot_factory, post_factory, sample_user)
        before = row_counts()

        def failing_cascade(session, list_id):
            session.query(ListSpot).filter(ListSpot.list_id == list_id).delete(synchronize_session=False)
            raise OperationalError('DELETE FROM post', {}, Exception('database is locked'))

        with patch.object(ListService, '_delete_cascade', side_effect=failing_cascade):
            response = client.delete(f'/api/lists/{spot_list.list_id}?force=true')

        assert response.status_code == 500
        assert response.get_json()['error'] == 'Internal server error'
        assert row_counts() == before

    def test_many_spots_warning(self, client, list_factory, spot_factory):
        spot_list = list_factory(spots=[spot_factory() for _ in range(6)])

        data = client.delete(f'/api/lists/{spot_list.list_id}?dryRun=true').get_json()

        assert data['would_delete']['warnings'] == ['6 spot associations will be removed']

    def test_unknown_list(self, client):
        response = client.delete('/api/lists/999')

        assert response.status_code == 404
        assert response.get_json()['error'] == 'List with ID 999 does not exist'
