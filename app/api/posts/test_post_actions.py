"""게시글 변경 액션(PostActions) 테스트"""

from datetime import datetime, timezone

import pytest

from conftest import FakeOpenAIClient
from app.models.action_result import ActionErrorCode
from app.services.openai_service import OpenAIService

VALID_FORM = {
    'title': 'Hello, World!',
    'content': 'This is the body of the post.',
    'tags': 'Python, flask, PYTHON',
}


@pytest.fixture
def post_actions(services):
    return services['post_actions']


@pytest.fixture
def published(services):
    """invalidation 서비스로 발행된 뷰 키를 모읍니다."""
    keys = []
    services['invalidation'].subscribe('', keys.append)
    return keys


def _seed_post(db, post_id, user_id='u1', **fields):
    data = {
        'title': 'Seeded post',
        'content': 'seeded content body',
        'tags': ['ai'],
        'userId': user_id,
        'likedBy': [],
        'likeCount': 0,
        'commentCount': 0,
        'isArchived': False,
        'createdAt': datetime(2024, 5, 10, tzinfo=timezone.utc),
    }
    data.update(fields)
    db.seed('posts', post_id, data)


# --- create ---

def test_create_post_allocates_slug_and_suffix(fake_db, post_actions):
    first = post_actions.create_post(VALID_FORM, 'u1')
    second = post_actions.create_post(VALID_FORM, 'u1')

    assert first.success and first.payload == {'post_id': 'hello-world'}
    assert second.success and second.payload == {'post_id': 'hello-world-1'}

    stored = fake_db.doc('posts/hello-world')
    assert stored['userId'] == 'u1'
    assert stored['tags'] == ['python', 'flask']
    assert stored['likedBy'] == [] and stored['likeCount'] == 0
    assert stored['commentCount'] == 0
    assert stored['isArchived'] is False


def test_create_post_publishes_affected_views(post_actions, published):
    result = post_actions.create_post(VALID_FORM, 'u1')

    assert 'posts:list' in result.affected_views
    assert 'post:hello-world' in result.affected_views
    assert 'tag:python' in result.affected_views
    assert 'profile:u1' in result.affected_views
    assert published == result.affected_views


@pytest.mark.parametrize('content, ok', [('x' * 9, False), ('x' * 10, True)])
def test_create_post_content_length_boundary(post_actions, content, ok):
    result = post_actions.create_post({'title': 'Boundary', 'content': content}, 'u1')

    assert result.success is ok
    if not ok:
        assert result.error_code is ActionErrorCode.VALIDATION_ERROR
        assert 'content' in result.errors


def test_create_post_validation_failure_touches_nothing(fake_db, post_actions, published):
    result = post_actions.create_post({'title': 'Hi', 'content': 'short'}, 'u1')

    assert not result.success
    assert set(result.errors) == {'title', 'content'}
    assert fake_db.documents == {}
    assert published == []


def test_create_post_requires_user(fake_db, post_actions):
    result = post_actions.create_post(VALID_FORM, None)

    assert not result.success
    assert 'user_id' in result.errors
    assert fake_db.documents == {}


def test_create_post_title_without_slug_characters(post_actions):
    result = post_actions.create_post({'title': '안녕하세요', 'content': 'long enough content'}, 'u1')

    assert not result.success
    assert result.error_code is ActionErrorCode.VALIDATION_ERROR
    assert 'title' in result.errors


def test_create_post_slug_exhausted(fake_db, post_actions):
    _seed_post(fake_db, 'hello-world')
    for n in range(1, 10):
        _seed_post(fake_db, f'hello-world-{n}')

    result = post_actions.create_post(VALID_FORM, 'u1')

    assert not result.success
    assert result.error_code is ActionErrorCode.SLUG_EXHAUSTED


def test_create_post_rejects_bad_image_url(post_actions):
    result = post_actions.create_post(dict(VALID_FORM, image_url='not a url'), 'u1')
    assert not result.success
    assert 'image_url' in result.errors


def test_create_post_store_error(fake_db, post_actions):
    fake_db.fail_on('set')
    result = post_actions.create_post(VALID_FORM, 'u1')

    assert not result.success
    assert result.error_code is ActionErrorCode.STORE_ERROR
    assert result.message.startswith('오류:')


# --- update ---

def test_update_post_by_owner_keeps_counters(fake_db, post_actions):
    _seed_post(fake_db, 'p', likedBy=['u2'], likeCount=1, commentCount=3, tags=['old'])

    result = post_actions.update_post('p', {'title': 'Edited title', 'content': 'edited content body',
                                            'tags': ['New']}, 'u1')

    assert result.success and result.payload == {'post_id': 'p'}
    stored = fake_db.doc('posts/p')
    assert stored['title'] == 'Edited title'
    assert stored['tags'] == ['new']
    assert stored['likeCount'] == 1 and stored['commentCount'] == 3
    assert stored['likedBy'] == ['u2']
    # 이전 태그와 새 태그 뷰 모두 무효화
    assert 'tag:old' in result.affected_views and 'tag:new' in result.affected_views


def test_update_post_by_other_user_is_forbidden(fake_db, post_actions):
    _seed_post(fake_db, 'p')
    before = fake_db.doc('posts/p')

    result = post_actions.update_post('p', {'title': 'Edited title', 'content': 'edited content body'}, 'u2')

    assert result.error_code is ActionErrorCode.FORBIDDEN
    assert fake_db.doc('posts/p') == before


def test_update_legacy_post_without_owner_is_forbidden(fake_db, post_actions):
    _seed_post(fake_db, 'legacy')
    fake_db.documents[('posts', 'legacy')].pop('userId')

    result = post_actions.update_post('legacy', {'title': 'Edited title', 'content': 'edited content body'}, 'u1')

    assert result.error_code is ActionErrorCode.FORBIDDEN


def test_update_missing_post(post_actions):
    result = post_actions.update_post('missing', {'title': 'Edited title', 'content': 'edited content body'}, 'u1')
    assert result.error_code is ActionErrorCode.NOT_FOUND


# --- delete ---

def test_delete_post_by_other_user_mutates_nothing(fake_db, fake_bucket, post_actions):
    fake_bucket.objects.add('posts/u1/thumb.png')
    _seed_post(fake_db, 'p', imageUrl='https://storage.googleapis.com/bucket/posts/u1/thumb.png')
    fake_db.seed('posts/p/comments', 'c1', {'postId': 'p', 'userId': 'u3', 'text': 'hi'})
    before = dict(fake_db.documents)

    result = post_actions.delete_post('p', 'u2')

    assert not result.success
    assert result.error_code is ActionErrorCode.FORBIDDEN
    assert '권한' in result.message
    assert fake_db.documents == before
    assert 'posts/u1/thumb.png' in fake_bucket.objects


def test_delete_post_cascades_comments_and_thumbnail(fake_db, fake_bucket, post_actions):
    fake_bucket.objects.add('posts/u1/thumb.png')
    _seed_post(fake_db, 'p', likedBy=['u7'], likeCount=1,
               imageUrl='https://firebasestorage.googleapis.com/v0/b/bucket/o/posts%2Fu1%2Fthumb.png?alt=media')
    fake_db.seed('posts/p/comments', 'c1', {'postId': 'p', 'userId': 'u3', 'text': 'hi'})
    fake_db.seed('posts/p/comments', 'c2', {'postId': 'p', 'userId': 'u4', 'text': 'yo'})
    _seed_post(fake_db, 'other')

    result = post_actions.delete_post('p', 'u1')

    assert result.success and result.payload == {'post_id': 'p'}
    assert fake_db.doc('posts/p') is None
    assert fake_db.doc('posts/p/comments/c1') is None
    assert fake_db.doc('posts/p/comments/c2') is None
    assert fake_db.doc('posts/other') is not None
    assert fake_bucket.objects == set()
    assert 'liked:u7' in result.affected_views
    assert 'comments:p' in result.affected_views


def test_delete_post_tolerates_thumbnail_failure(fake_db, fake_bucket, post_actions):
    fake_bucket.objects.add('posts/u1/thumb.png')
    fake_bucket.errors['posts/u1/thumb.png'] = RuntimeError('storage down')
    _seed_post(fake_db, 'p', imageUrl='https://storage.googleapis.com/bucket/posts/u1/thumb.png')

    result = post_actions.delete_post('p', 'u1')

    assert result.success
    assert fake_db.doc('posts/p') is None


def test_delete_post_with_thumbnail_already_gone(fake_db, post_actions):
    _seed_post(fake_db, 'p', imageUrl='https://storage.googleapis.com/bucket/posts/u1/gone.png')
    assert post_actions.delete_post('p', 'u1').success


# --- like / archive ---

def test_toggle_like_round_trip(fake_db, post_actions):
    _seed_post(fake_db, 'p')

    liked = post_actions.toggle_like('p', 'u2')
    assert liked.success
    assert liked.payload == {'post_id': 'p', 'liked': True, 'new_count': 1}
    assert fake_db.doc('posts/p')['likedBy'] == ['u2']

    unliked = post_actions.toggle_like('p', 'u2')
    assert unliked.payload == {'post_id': 'p', 'liked': False, 'new_count': 0}
    assert fake_db.doc('posts/p')['likedBy'] == []
    assert fake_db.doc('posts/p')['likeCount'] == 0
    assert 'liked:u2' in unliked.affected_views


def test_toggle_like_validation_and_missing_post(post_actions):
    assert post_actions.toggle_like('p', None).error_code is ActionErrorCode.VALIDATION_ERROR
    assert post_actions.toggle_like('', 'u2').error_code is ActionErrorCode.VALIDATION_ERROR
    assert post_actions.toggle_like('missing', 'u2').error_code is ActionErrorCode.NOT_FOUND


def test_toggle_archive_hides_post_from_lists(fake_db, services, post_actions):
    _seed_post(fake_db, 'p')

    result = post_actions.toggle_archive('p', 'u1')
    assert result.payload == {'post_id': 'p', 'is_archived': True}
    assert services['posts'].get_posts() == []
    assert services['posts'].get_post('p').is_archived is True

    result = post_actions.toggle_archive('p', 'u1')
    assert result.payload == {'post_id': 'p', 'is_archived': False}
    assert [p.post_id for p in services['posts'].get_posts()] == ['p']


def test_toggle_archive_by_other_user(fake_db, post_actions):
    _seed_post(fake_db, 'p')
    assert post_actions.toggle_archive('p', 'u2').error_code is ActionErrorCode.FORBIDDEN


# --- AI 태그 추천 ---

def test_suggest_tags_short_content_skips_model(post_actions, openai_client):
    result = post_actions.suggest_tags({'content': '   too short   '})

    assert result.success and result.payload == {'tags': []}
    assert openai_client.chat.completions.calls == []


def test_suggest_tags_normalises_model_reply(post_actions, openai_client):
    result = post_actions.suggest_tags({'content': 'A long post about building web apps in Python.'})

    assert result.success
    assert result.payload == {'tags': ['python', 'flask', 'testing']}
    assert len(openai_client.chat.completions.calls) == 1


def test_suggest_tags_model_failure(services):
    actions = services['post_actions']
    actions.openai_service = OpenAIService(client=FakeOpenAIClient(error=RuntimeError('quota')))

    result = actions.suggest_tags({'content': 'A long post about building web apps in Python.'})

    assert not result.success
    assert result.error_code is ActionErrorCode.SERVICE_UNAVAILABLE


def test_suggest_tags_without_model(services):
    actions = services['post_actions']
    actions.openai_service = None

    result = actions.suggest_tags({'content': 'A long post about building web apps in Python.'})

    assert result.error_code is ActionErrorCode.SERVICE_UNAVAILABLE
