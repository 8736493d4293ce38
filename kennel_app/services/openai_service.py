# kennel_app/services/openai_service.py
import json
import logging
from typing import Any, Dict, List, Optional

from flask import Flask
from openai import OpenAI, APIStatusError, APIConnectionError

DEFAULT_BASE_URL = 'https://api.deepseek.com/v1'
DEFAULT_MODEL = 'deepseek-chat'
FALLBACK_REPLY = "죄송합니다. AI 분석 서비스가 일시적으로 응답할 수 없습니다."

SYSTEM_PROMPT = """당신은 반려견 번식 사업 전문 경영 컨설턴트로, 재무 분석, 건강 관리, 번식 관리, 사업 운영에 정통합니다.
제공된 데이터를 바탕으로 다음 다섯 가지 관점에서 심층 분석하고 전문적인 조언을 제시해주세요:

1. 재무 현황 분석 (수입, 지출, 수익성, 비용 통제)
2. 건강 관리 평가 (예방접종 커버리지, 질병 예방, 치료 비용)
3. 번식 사업 분석 (교배 성공률, 자견 생존율, 번식 주기)
4. 재고 관리 (분양 가능 견 수, 견종 분포, 시장 포지셔닝)
5. 운영 효율 제안 (프로세스 개선, 리스크 관리, 성장 기회)

한국어로 답변하고, 구조를 명확히 하며, 모든 제안은 구체적으로 실행 가능해야 하고 우선순위를 함께 제시해주세요."""


class AnalysisServiceError(Exception):
    """
    분석 API 호출 실패. HTTP 상태 코드(전송 오류면 None)와 응답 본문을 담습니다.
    호출하는 쪽은 이 예외를 잡아 사용자에게 오류를 보여줘야 합니다.
    """

    def __init__(self, status_code: Optional[int], body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Analysis API error: {status_code} - {body}")


class AnalysisService:
    """
    OpenAI 호환 chat-completion API 연동을 담당하는 서비스 클래스.
    사업 지표 JSON 을 받아 경영 조언 텍스트를 생성합니다.
    """

    def __init__(self):
        """
        클라이언트는 init_app 에서 설정됩니다.
        """
        self.client = None
        self.model = DEFAULT_MODEL

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 OpenAI 클라이언트를 설정합니다.
        API 키가 없으면 경고만 남기고, 실제 호출 시점에 오류가 납니다.

        :param app: Flask 애플리케이션 객체
        """
        api_key = app.config.get('ANALYSIS_API_KEY')
        self.model = app.config.get('ANALYSIS_MODEL') or DEFAULT_MODEL
        if not api_key:
            logging.warning("AnalysisService: ANALYSIS_API_KEY is not set, AI analysis is disabled.")
            return

        self.client = OpenAI(
            api_key=api_key,
            base_url=app.config.get('ANALYSIS_BASE_URL') or DEFAULT_BASE_URL,
            timeout=app.config.get('ANALYSIS_TIMEOUT_SECONDS', 60),
        )
        logging.info(f"AnalysisService: 분석 API 서비스가 초기화되었습니다 (model: {self.model}).")

    def chat(self, messages: List[Dict[str, str]]) -> str:
        """
        메시지 목록으로 chat-completion 을 호출하고 첫 번째 응답 텍스트를 반환합니다.

        :param messages: {'role': 'system'|'user'|'assistant', 'content': str} 목록
        :return: 응답 텍스트. 비어 있으면 FALLBACK_REPLY
        """
        if not self.client:
            raise RuntimeError("AnalysisService가 초기화되지 않았습니다. ANALYSIS_API_KEY 를 설정해주세요.")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=4000,
                temperature=0.7,
                stream=False,
            )
        except APIStatusError as e:
            logging.error(f"Analysis API returned {e.status_code}: {e.response.text}")
            raise AnalysisServiceError(e.status_code, e.response.text) from e
        except APIConnectionError as e:
            logging.error(f"Analysis API transport error: {e}", exc_info=True)
            raise AnalysisServiceError(None, str(e)) from e

        choices = getattr(response, 'choices', None) or []
        if not choices or not choices[0].message or not choices[0].message.content:
            return FALLBACK_REPLY
        return choices[0].message.content

    def analyze_business_data(self, data: Dict[str, Any]) -> str:
        """
        사업 지표 데이터를 분석하여 경영 조언을 생성합니다.

        :param data: DataCollector 가 만든 지표 딕셔너리 (JSON 직렬화 가능해야 함)
        :return: 분석 보고서 텍스트
        """
        user_prompt = (
            "다음 반려견 번식 관리 시스템의 사업 데이터를 분석해주세요:\n\n"
            f"{json.dumps(data, ensure_ascii=False, indent=2, default=str)}\n\n"
            "상세한 분석 보고서와 개선 제안을 제시해주세요."
        )
        return self.chat([
            {'role': 'system', 'content': SYSTEM_PROMPT},
            {'role': 'user', 'content': user_prompt},
        ])
