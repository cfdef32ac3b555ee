# app/api/comments/services.py

import logging
from firebase_admin import firestore
from typing import Optional, List

from app.api.posts.services import PostService
from app.models.comment import Comment, UserActivityComment
from app.utils.datetime_utils import DateTimeUtils
from app.utils.text_utils import is_valid_document_id

# Firestore WriteBatch 한 번에 담을 수 있는 최대 쓰기 수
BATCH_LIMIT = 500

POST_NOT_FOUND_TITLE = "게시글을 찾을 수 없거나 접근할 수 없습니다"


class CommentService:
    """
    댓글 저장소(Repository) 역할의 서비스 클래스.
    - 댓글은 'posts/{post_id}/comments' 하위 컬렉션에 저장됩니다.
    - 작성자별 조회는 'comments' collection group 쿼리를 사용합니다.
    """
    def __init__(self, post_service: PostService, db=None):
        """서비스 초기화 시 Firestore 클라이언트 및 컬렉션 참조를 설정합니다."""
        self.db = db or firestore.client()
        self.posts_ref = self.db.collection('posts')
        self.post_service = post_service

    def _comments_ref(self, post_id: str):
        return self.posts_ref.document(post_id).collection('comments')

    @staticmethod
    def _comment_from_doc(doc, post_id: Optional[str] = None) -> Comment:
        data = doc.to_dict() or {}
        return Comment(
            comment_id=doc.id,
            post_id=post_id or data.get('postId'),
            user_id=data.get('userId'),
            user_display_name=data.get('userDisplayName', ''),
            user_photo_url=data.get('userPhotoURL'),
            text=data.get('text', ''),
            created_at=DateTimeUtils.from_firestore(data.get('createdAt')) or DateTimeUtils.now(),
        )

    def get_comments_for_post(self, post_id: str) -> List[Comment]:
        """게시글의 댓글을 오래된 순(표시 순서)으로 조회합니다."""
        if not is_valid_document_id(post_id):
            logging.warning(f"댓글 조회: 올바르지 않은 post_id ({post_id!r})")
            return []
        try:
            query = self._comments_ref(post_id).order_by('createdAt', direction=firestore.Query.ASCENDING)
            return [self._comment_from_doc(doc, post_id) for doc in query.stream()]
        except Exception as e:
            logging.error(f"댓글 목록 조회 실패 (post_id: {post_id}): {e}", exc_info=True)
            return []

    def get_comments_by_user(self, user_id: str) -> List[UserActivityComment]:
        """
        모든 게시글에 걸쳐 사용자가 작성한 댓글을 최신순으로 조회합니다.
        각 댓글마다 부모 게시글 제목을 한 번씩 조회합니다 (N+1, 소규모 전제).
        postId 필드가 없는 댓글은 건너뜁니다.
        """
        if not user_id:
            return []
        try:
            query = (self.db.collection_group('comments')
                     .where('userId', '==', user_id)
                     .order_by('createdAt', direction=firestore.Query.DESCENDING))
            docs = list(query.stream())
        except Exception as e:
            # 대부분 collection group 복합 색인(userId ASC, createdAt DESC) 누락이 원인
            logging.error(f"사용자 댓글 조회 실패 (user_id: {user_id}): {e}", exc_info=True)
            return []

        activity: List[UserActivityComment] = []
        for doc in docs:
            data = doc.to_dict() or {}
            post_id = data.get('postId')
            if not post_id:
                logging.warning(f"댓글 {doc.id} (user_id: {user_id}) 에 postId 필드가 없어 건너뜁니다.")
                continue

            comment = self._comment_from_doc(doc)
            post = self.post_service.get_post(post_id)
            if post is None:
                logging.warning(f"댓글 {doc.id} 의 게시글({post_id})을 찾을 수 없습니다.")
            activity.append(UserActivityComment(
                **vars(comment),
                post_title=post.title if post else POST_NOT_FOUND_TITLE,
                post_slug=post_id,
            ))
        return activity

    def add_comment(self, post_id: str, user_id: str, display_name: str, text: str,
                    photo_url: Optional[str] = None) -> Comment:
        """
        댓글을 생성하고 부모 게시글의 commentCount 를 1 증가시킵니다.
        - 부모 게시글이 없으면 ValueError (끊어진 참조 쓰기 방지)
        - 댓글 생성과 카운터 증가는 하나의 WriteBatch 로 함께 커밋됩니다.
        """
        if not is_valid_document_id(post_id):
            raise ValueError("댓글을 작성할 게시글이 존재하지 않습니다.")
        post_ref = self.posts_ref.document(post_id)
        if not post_ref.get().exists:
            raise ValueError("댓글을 작성할 게시글이 존재하지 않습니다.")

        comment_ref = self._comments_ref(post_id).document()
        comment = Comment(
            comment_id=comment_ref.id,
            post_id=post_id,
            user_id=user_id,
            user_display_name=display_name,
            user_photo_url=photo_url,
            text=text,
        )
        comment_data = {
            'postId': post_id,
            'userId': user_id,
            'userDisplayName': display_name,
            'text': text,
            'createdAt': comment.created_at,
        }
        if photo_url:
            comment_data['userPhotoURL'] = photo_url

        batch = self.db.batch()
        batch.set(comment_ref, comment_data)
        batch.update(post_ref, {'commentCount': firestore.Increment(1)})
        batch.commit()
        logging.info(f"댓글 생성 완료 (post_id: {post_id}, comment_id: {comment.comment_id})")
        return comment

    def delete_comments_for_post(self, post_id: str) -> int:
        """게시글 삭제 시 하위 댓글을 모두 삭제하고 삭제한 개수를 반환합니다."""
        deleted = 0
        batch = self.db.batch()
        pending = 0
        for doc in self._comments_ref(post_id).stream():
            batch.delete(doc.reference)
            pending += 1
            if pending == BATCH_LIMIT:
                batch.commit()
                deleted += pending
                batch, pending = self.db.batch(), 0
        if pending:
            batch.commit()
            deleted += pending
        logging.info(f"게시글 {post_id} 의 댓글 {deleted}건 삭제")
        return deleted
