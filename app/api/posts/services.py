# app/api/posts/services.py
import logging
from collections import OrderedDict
from typing import Optional, Dict, Any, List, Tuple
from urllib.parse import unquote
from firebase_admin import firestore

from app.models.post import Post, ArchivePeriod
from app.utils.datetime_utils import DateTimeUtils
from app.utils.text_utils import generate_slug, is_valid_document_id, normalize_tag, normalize_tags

MAX_SLUG_ATTEMPTS = 10


class SlugAllocationError(Exception):
    """제목으로부터 고유한 slug 를 만들지 못했을 때 발생합니다."""


class PostService:
    """
    게시글 저장소(Repository) 역할의 서비스 클래스.
    - Firestore 'posts' 문서와 Post 엔티티 사이의 변환(타임스탬프 포함)을 전담합니다.
    - 조회 메서드는 실패 시 로그를 남기고 빈 결과를 반환합니다.
    - 보관(archived) 게시글 제외는 정렬된 쿼리 결과에 대해 파이썬에서 적용합니다.
      (isArchived 필드가 없는 이전 문서도 공개 게시글로 취급하기 위함)
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.posts_ref = self.db.collection('posts')

    # ------------------------------------------------------------------
    # 문서 <-> 엔티티 변환
    # ------------------------------------------------------------------
    @staticmethod
    def _post_from_doc(doc) -> Post:
        data = doc.to_dict() or {}
        liked_by = list(data.get('likedBy') or [])
        return Post(
            post_id=doc.id,
            title=data.get('title', ''),
            content=data.get('content', ''),
            tags=list(data.get('tags') or []),
            user_id=data.get('userId'),
            image_url=data.get('imageUrl'),
            liked_by=liked_by,
            like_count=max(int(data.get('likeCount') or 0), 0),
            comment_count=int(data.get('commentCount') or 0),
            is_archived=bool(data.get('isArchived', False)),
            created_at=DateTimeUtils.from_firestore(data.get('createdAt')) or DateTimeUtils.now(),
            updated_at=DateTimeUtils.from_firestore(data.get('updatedAt')),
        )

    @staticmethod
    def _post_to_doc(post: Post) -> Dict[str, Any]:
        doc = {
            'title': post.title,
            'content': post.content,
            'tags': list(post.tags),
            'userId': post.user_id,
            'likedBy': list(post.liked_by),
            'likeCount': post.like_count,
            'commentCount': post.comment_count,
            'isArchived': post.is_archived,
            'createdAt': post.created_at,
            'updatedAt': post.updated_at or post.created_at,
        }
        if post.image_url:
            doc['imageUrl'] = post.image_url
        return DateTimeUtils.for_firestore(doc)

    def _ordered(self, query, direction=firestore.Query.DESCENDING):
        return query.order_by('createdAt', direction=direction)

    def _collect_active(self, query, limit: Optional[int] = None) -> List[Post]:
        """쿼리 결과에서 보관되지 않은 게시글만 순서대로 모읍니다."""
        posts: List[Post] = []
        if limit is not None and limit <= 0:
            return posts
        for doc in query.stream():
            post = self._post_from_doc(doc)
            if post.is_archived:
                continue
            posts.append(post)
            if limit is not None and len(posts) >= limit:
                break
        return posts

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------
    def get_posts(self, limit: Optional[int] = None) -> List[Post]:
        """보관되지 않은 게시글을 최신순으로 조회합니다."""
        try:
            return self._collect_active(self._ordered(self.posts_ref), limit)
        except Exception as e:
            logging.error(f"게시글 목록 조회 실패: {e}", exc_info=True)
            return []

    def get_post(self, post_id: str) -> Optional[Post]:
        """보관 여부와 관계없이 게시글 한 건을 조회합니다. 없거나 ID가 올바르지 않으면 None."""
        if not is_valid_document_id(post_id):
            return None
        try:
            doc = self.posts_ref.document(post_id).get()
            if not doc.exists:
                return None
            return self._post_from_doc(doc)
        except Exception as e:
            logging.error(f"게시글 조회 실패 (post_id: {post_id}): {e}", exc_info=True)
            return None

    def get_posts_by_user_id(self, user_id: str) -> List[Post]:
        """
        특정 사용자의 모든 게시글(보관 포함)을 최신순으로 조회합니다.
        공개/보관 분리는 프로필 화면이 담당합니다.
        """
        if not user_id:
            return []
        try:
            query = self._ordered(self.posts_ref.where('userId', '==', user_id))
            return [self._post_from_doc(doc) for doc in query.stream()]
        except Exception as e:
            logging.error(f"사용자 게시글 조회 실패 (user_id: {user_id}): {e}", exc_info=True)
            return []

    def get_posts_by_tag(self, tag: str) -> List[Post]:
        """태그(대소문자 무시)가 포함된 공개 게시글을 최신순으로 조회합니다."""
        normalized = normalize_tag(unquote(tag or ''))
        if not normalized:
            return []
        try:
            query = self._ordered(self.posts_ref.where('tags', 'array_contains', normalized))
            return self._collect_active(query)
        except Exception as e:
            logging.error(f"태그별 게시글 조회 실패 (tag: {tag}): {e}", exc_info=True)
            return []

    def get_posts_by_archive(self, year: int, month: int) -> List[Post]:
        """
        [해당 월 1일, 다음 달 1일) 구간에 작성된 공개 게시글을 최신순으로 조회합니다.

        :param month: 0부터 시작하는 월 (0 = 1월)
        """
        try:
            start, end = DateTimeUtils.get_month_range(year, month)
            query = (self.posts_ref
                     .where('createdAt', '>=', start)
                     .where('createdAt', '<', end))
            return self._collect_active(self._ordered(query))
        except Exception as e:
            logging.error(f"아카이브 게시글 조회 실패 ({year}-{month + 1}): {e}", exc_info=True)
            return []

    def get_liked_posts_by_user(self, user_id: str) -> List[Post]:
        """사용자가 좋아요한 공개 게시글을 최신순으로 조회합니다."""
        if not user_id:
            return []
        try:
            query = self._ordered(self.posts_ref.where('likedBy', 'array_contains', user_id))
            return self._collect_active(query)
        except Exception as e:
            logging.error(f"좋아요한 게시글 조회 실패 (user_id: {user_id}): {e}", exc_info=True)
            return []

    def get_all_tags(self) -> List[str]:
        """공개 게시글 전체 태그의 정렬된 합집합 (소문자, 중복 제거)."""
        tags = set()
        for post in self.get_posts():
            tags.update(normalize_tags(post.tags))
        return sorted(tags)

    def get_archive_periods(self) -> List[ArchivePeriod]:
        """공개 게시글을 (연, 월)로 묶어 최신 구간부터 개수를 반환합니다."""
        periods: "OrderedDict[Tuple[int, int], ArchivePeriod]" = OrderedDict()
        for post in self.get_posts():
            key = (post.created_at.year, post.created_at.month - 1)
            if key in periods:
                periods[key].count += 1
            else:
                periods[key] = ArchivePeriod(
                    year=key[0], month=key[1],
                    month_name=DateTimeUtils.month_name(key[1]), count=1,
                )
        return sorted(periods.values(), key=lambda p: (p.year, p.month), reverse=True)

    # ------------------------------------------------------------------
    # slug
    # ------------------------------------------------------------------
    @staticmethod
    def generate_slug(title: str) -> str:
        return generate_slug(title)

    def is_slug_unique(self, slug: str) -> bool:
        """해당 slug 를 ID로 가진 게시글이 없으면 True. 조회 오류 시 안전하게 False."""
        if not is_valid_document_id(slug):
            return False
        try:
            return not self.posts_ref.document(slug).get().exists
        except Exception as e:
            logging.error(f"slug 중복 확인 실패 (slug: {slug}): {e}", exc_info=True)
            return False

    def allocate_slug(self, title: str) -> str:
        """
        base, base-1, base-2 ... 순으로 비어 있는 slug 를 찾습니다.
        확인과 생성 사이에는 격리가 없으므로 같은 제목의 동시 생성은 나중 쓰기가 덮어씁니다.
        """
        base = generate_slug(title)
        if not base:
            raise SlugAllocationError("제목에서 게시글 주소를 만들 수 없습니다.")
        candidate = base
        for attempt in range(1, MAX_SLUG_ATTEMPTS + 1):
            if self.is_slug_unique(candidate):
                return candidate
            candidate = f"{base}-{attempt}"
        raise SlugAllocationError("게시글의 고유한 주소를 만들 수 없습니다.")

    # ------------------------------------------------------------------
    # 쓰기 (변경 액션에서만 호출)
    # ------------------------------------------------------------------
    def create_post(self, post: Post) -> Post:
        self.posts_ref.document(post.post_id).set(self._post_to_doc(post))
        logging.info(f"게시글 생성 완료 (post_id: {post.post_id})")
        return post

    def update_post_content(self, post_id: str, title: str, content: str, tags: List[str],
                            image_url: Optional[str] = None, remove_image: bool = False) -> None:
        """제목/본문/태그/이미지만 덮어씁니다. 좋아요/댓글 수와 보관 상태는 건드리지 않습니다."""
        update_data: Dict[str, Any] = {
            'title': title,
            'content': content,
            'tags': list(tags),
            'updatedAt': DateTimeUtils.now(),
        }
        if image_url:
            update_data['imageUrl'] = image_url
        elif remove_image:
            update_data['imageUrl'] = firestore.DELETE_FIELD
        self.posts_ref.document(post_id).update(update_data)

    def delete_post(self, post_id: str) -> None:
        self.posts_ref.document(post_id).delete()
        logging.info(f"게시글 문서 삭제 완료 (post_id: {post_id})")

    def toggle_like(self, post_id: str, user_id: str) -> Tuple[bool, int]:
        """
        좋아요를 토글합니다.
        - 현재 상태 판단은 일반 읽기이고, 반영은 배열/증가 원자 연산 한 번으로 수행합니다.
        - 읽기와 쓰기 사이의 경쟁(연속 이중 클릭 등)은 이 계층에서 막지 않습니다.

        :return: (좋아요 여부, 새 좋아요 수)
        """
        post_ref = self.posts_ref.document(post_id)
        doc = post_ref.get()
        if not doc.exists:
            raise ValueError("게시글을 찾을 수 없습니다.")

        data = doc.to_dict() or {}
        current_count = max(int(data.get('likeCount') or 0), 0)
        if user_id in (data.get('likedBy') or []):
            # 0 아래로 내려가지 않도록 보정
            count_update = firestore.Increment(-1) if current_count > 0 else 0
            post_ref.update({
                'likedBy': firestore.ArrayRemove([user_id]),
                'likeCount': count_update,
            })
            return False, max(current_count - 1, 0)

        post_ref.update({
            'likedBy': firestore.ArrayUnion([user_id]),
            'likeCount': firestore.Increment(1),
        })
        return True, current_count + 1

    def set_archived(self, post_id: str, is_archived: bool) -> None:
        self.posts_ref.document(post_id).update({
            'isArchived': is_archived,
            'updatedAt': DateTimeUtils.now(),
        })

