# app/services/openai_service.py
import logging
from typing import List
from flask import Flask
from openai import OpenAI

from app.utils.text_utils import normalize_tags

MAX_SUGGESTED_TAGS = 5

class OpenAIService:
    """
    OpenAI API 연동을 담당하는 서비스 클래스.
    게시글 본문을 분석해 태그를 추천하는 기능을 제공합니다.
    """

    def __init__(self, client=None, model: str = "gpt-4o-mini"):
        """
        OpenAI 클라이언트는 init_app 메서드를 통해 설정됩니다.
        """
        self.client = client
        self.model = model

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 OpenAI 클라이언트를 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        api_key = app.config.get('OPENAI_API_KEY')
        if not api_key:
            raise ValueError("OPENAI_API_KEY 설정이 .env 파일에 필요합니다.")

        self.client = OpenAI(api_key=api_key)
        self.model = app.config.get('OPENAI_TAG_MODEL') or self.model
        logging.info("OpenAIService: OpenAI API 서비스가 성공적으로 초기화되었습니다.")

    def suggest_tags(self, post_content: str) -> List[str]:
        """
        게시글 본문에 어울리는 태그를 추천합니다.

        :param post_content: 게시글 본문 (HTML 포함 가능)
        :return: 정규화된(소문자, 중복 제거) 태그 목록
        """
        if not self.client:
            raise RuntimeError("OpenAIService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "system",
                    "content": (
                        "You suggest tags for blog posts. Reply with at most "
                        f"{MAX_SUGGESTED_TAGS} short lowercase tags separated by commas and nothing else."
                    ),
                },
                {"role": "user", "content": post_content},
            ],
            temperature=0.3,
        )
        raw = response.choices[0].message.content or ""
        return normalize_tags(raw)[:MAX_SUGGESTED_TAGS]
