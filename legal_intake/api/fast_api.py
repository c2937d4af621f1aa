"""
FastAPI Router — Legal Chatbot • Conversation Summary • Health
==============================================================

Purpose
-------
Defines the HTTP API for:
- Chat endpoint that orchestrates the legal intake and Q&A flows
- Admin-facing summary of a case's intake conversation
- Liveness probe

Key Notes
---------
- Input validation via Pydantic models in `legal_intake.api.models`.
- Bodies are read as raw JSON so that a malformed body answers 500 ``{error}``
  like every other failure, instead of FastAPI's 422.
- Every response (errors and preflight included) carries the CORS headers.
- The chat model is injected through `get_chat_model_factory` so it can be
  overridden in tests.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from legal_intake.api.llm_pipeline import (
    ChatModelFactory,
    IntakePipeline,
    build_chat_model,
    summarize_case_conversation,
)
from legal_intake.api.models import CaseSummaryRequest, ChatRequest
from legal_intake.database.config.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()
"""Creates the FastAPI router in which we define its routes"""

CORS_HEADERS = {
    'Access-Control-Allow-Origin': settings.FRONTEND_URL,
    'Access-Control-Allow-Headers': 'authorization, x-client-info, apikey, content-type',
    'Access-Control-Allow-Methods': 'POST, GET, OPTIONS',
}


def get_chat_model_factory() -> ChatModelFactory:
    """Dependency returning the callable that builds chat models."""
    return build_chat_model


def error_response(e: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={'error': str(e)}, headers=CORS_HEADERS)


@router.options('/legal-chatbot')
@router.options('/generate-conversation-summary')
async def preflight():
    """CORS preflight: empty 200, no database or LLM work."""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post('/legal-chatbot')
async def legal_chatbot(request: Request, model_factory: ChatModelFactory = Depends(get_chat_model_factory)):
    """Main chat endpoint.

    Request body:
        ChatRequest {message, conversation_id?, mode?, language?, caseId?, lawyerId?}

    Response:
        200: {response, extractedData?, needsPersonalDetails?, nextQuestions?,
              jurisdictionRejected?, conversation_id?, conversationId?}
        500: {error}
    """
    try:
        body = await request.json()
        chat_request = ChatRequest(**body)
        pipeline = IntakePipeline(model_factory)
        result = await run_in_threadpool(pipeline.run, chat_request)
        return JSONResponse(content=result.model_dump(exclude_none=True), headers=CORS_HEADERS)
    except Exception as e:
        logger.exception("Error in legal-chatbot function")
        return error_response(e)


@router.post('/generate-conversation-summary')
async def generate_conversation_summary(
    request: Request, model_factory: ChatModelFactory = Depends(get_chat_model_factory)
):
    """Summarize the intake conversation of a case and store it as `ai_summary`.

    Request body:
        CaseSummaryRequest {caseId, clientName?}

    Response:
        200: {summary}
        500: {error}
    """
    try:
        body = await request.json()
        summary_request = CaseSummaryRequest(**body)
        if not summary_request.caseId:
            raise ValueError('caseId is required')
        summary = await run_in_threadpool(
            summarize_case_conversation,
            summary_request.caseId,
            summary_request.clientName,
            model_factory,
        )
        return JSONResponse(content={'summary': summary}, headers=CORS_HEADERS)
    except Exception as e:
        logger.exception("Error generating conversation summary")
        return error_response(e)


@router.get('/health')
def health():
    """Liveness probe."""
    return JSONResponse(content={'status': 'ok'}, headers=CORS_HEADERS)
