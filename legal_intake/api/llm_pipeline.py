"""
Legal Intake Workflow: History • Knowledge • Prompt • LLM • Extraction • Persistence
====================================================================================

Purpose
-------
This module drives one chat request end to end:

1. Conversation loader   : replay the conversation's turns in insertion order.
2. Knowledge retriever   : keyword match against `legal_knowledge` (max 5 rows).
3. Prompt builder        : mode template + knowledge + categories / case context.
4. LLM caller            : a single chat completion; in intake mode the model is
                           offered the `extract_case_data` function.
5. Extraction handler    : validated extraction → conversation metadata, new
                           draft case, or overwrite of the linked draft case.
6. Summary generator     : second completion summarizing the client's turns.
7. Persistence           : user turn + assistant reply appended to `messages`
                           (and mirrored to `case_messages` when a case is linked).

Failure policy
--------------
- Upstream non-2xx: no retry. A canned apology in the request language
  becomes the reply, the exchange is still saved with ``fallback: true``.
- Draft-case writes, the case-message mirror and the knowledge lookup are
  side effects: their errors are logged and swallowed so the reply is always
  returned.
- Everything else propagates to the router, which answers 500.

Every request builds its own `IntakePipeline`; nothing is shared between
requests besides the database engine.

Configuration (settings)
------------------------
- settings.OPENAI_API_KEY        : OpenAI API key, checked per request.
- settings.OPEN_AI_MODEL         : Chat model name (default "gpt-4o-mini").
- settings.CHAT_MAX_TOKENS / CHAT_TEMPERATURE       : reply call.
- settings.SUMMARY_MAX_TOKENS / SUMMARY_TEMPERATURE : summary calls.
- settings.ENFORCE_JURISDICTION  : decline extractions located abroad.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import openai
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import ValidationError

from legal_intake.api.models import (
    CaseExtraction,
    ChatRequest,
    ChatResponse,
    ConversationSummary,
    Extraction,
    NoExtraction,
)
from legal_intake.api.prompt_utilities import (
    CASE_CONVERSATION_SUMMARY_PROMPT,
    CLIENT_RESPONSES_SUMMARY_PROMPT,
    EXTRACT_CASE_DATA_FUNCTION,
    FALLBACK_MESSAGES,
    FUNCTION_ONLY_REPLIES,
    JURISDICTION_DECLINE_MESSAGES,
    build_system_prompt,
    extract_keywords,
    is_within_jurisdiction,
    localized,
)
from legal_intake.api.utils import lc_text_from_content, parse_llm_json
from legal_intake.database.config.config import settings
from legal_intake.database.core.funcs import (
    ConversationNotFound,
    create_conversation,
    create_draft_case,
    get_active_case_categories,
    get_case_context,
    get_case_transcript,
    get_conversation,
    get_conversation_history,
    mirror_case_messages,
    save_exchange,
    search_legal_knowledge,
    store_case_summary,
    store_conversation_extraction,
    update_draft_case,
)

logger = logging.getLogger(__name__)

ChatModelFactory = Callable[..., BaseChatModel]

LANGUAGE_NAMES = {'en': 'English', 'ar': 'Arabic', 'de': 'German'}


def build_chat_model(**overrides) -> ChatOpenAI:
    """
    Create the OpenAI chat model for one call.

    Retries are disabled: an upstream failure is answered with the canned
    fallback reply instead.

    Raises:
        RuntimeError: if `OPENAI_API_KEY` is not configured.
    """
    if not settings.OPENAI_API_KEY:
        raise RuntimeError('OPENAI_API_KEY is not set')
    params = {
        'model': settings.OPEN_AI_MODEL,
        'api_key': settings.OPENAI_API_KEY,
        'max_retries': 0,
    }
    params.update(overrides)
    return ChatOpenAI(**params)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_extraction(function_call: Optional[dict]) -> Extraction:
    """
    Turn the model's function call into `CaseExtraction` or `NoExtraction`.

    Args:
        function_call: ``{"name": ..., "arguments": "<json>"}`` as found in
            ``AIMessage.additional_kwargs["function_call"]``, or None.

    Returns:
        CaseExtraction when the arguments parse and match the schema,
        otherwise NoExtraction carrying the reason.
    """
    if not function_call:
        return NoExtraction()
    name = function_call.get('name')
    if name != EXTRACT_CASE_DATA_FUNCTION['name']:
        return NoExtraction(reason=f"unexpected function call: {name}")
    try:
        arguments = parse_llm_json(function_call.get('arguments') or '')
    except ValueError as e:
        return NoExtraction(reason=f"invalid arguments: {e}")
    try:
        return CaseExtraction.model_validate(arguments)
    except ValidationError as e:
        return NoExtraction(reason=f"arguments do not match schema: {e.error_count()} error(s)")


def case_fields_from_extraction(
    extraction: CaseExtraction, language: str, client_summary: ConversationSummary
) -> dict:
    """Map an extraction onto `cases` columns for a new draft."""
    return {
        'title': extraction.category or 'New Legal Case',
        'description': extraction.summary or 'Case created from AI intake conversation',
        'category': extraction.category or 'General',
        'urgency': extraction.urgency or 'medium',
        'language': language or 'en',
        'extracted_entities': extraction.entities.model_dump(),
        'legal_analysis': {
            'classification': extraction.legalClassification.model_dump(),
            'violationTypes': extraction.violationTypes,
            'remedies': extraction.remedies,
            'readyForNextStep': extraction.readyForNextStep,
        },
        'case_complexity_score': extraction.complexityScore,
        'client_responses_summary': client_summary.model_dump(),
    }


def case_update_fields(fields: dict) -> dict:
    """Columns rewritten on an existing draft: everything but title and language."""
    return {column: value for column, value in fields.items() if column not in ('title', 'language')}


class IntakePipeline:
    """
    One chat request through the intake / Q&A workflow.

    Args:
        model_factory: callable returning a LangChain chat model; receives
            per-call overrides such as ``max_tokens`` and ``temperature``.
            Defaults to `build_chat_model` (OpenAI).
    """

    def __init__(self, model_factory: ChatModelFactory = build_chat_model):
        self.model_factory = model_factory

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def load_history(self, conversation_id) -> List[BaseMessage]:
        """Replay stored turns as LangChain messages (oldest first)."""
        history = get_conversation_history(conversation_id=conversation_id)
        messages: List[BaseMessage] = []
        for turn in history:
            if turn['role'] == 'assistant':
                messages.append(AIMessage(content=turn['content']))
            else:
                messages.append(HumanMessage(content=turn['content']))
        return messages

    def retrieve_knowledge(self, message: str, language: str) -> List[dict]:
        """Keyword lookup in `legal_knowledge`; an empty list on any error."""
        keywords = extract_keywords(message)
        if not keywords:
            return []
        try:
            return search_legal_knowledge(keywords=keywords, language=language, limit=5)
        except Exception:
            logger.exception("Legal knowledge lookup failed; continuing without references")
            return []

    def generate_client_summary(self, user_turns: List[str], language: str) -> ConversationSummary:
        """
        Summarize the client's turns as structured JSON.

        Output that does not parse as the expected JSON object ends up as raw
        text in `summary` with every list left empty.
        """
        prompt = CLIENT_RESPONSES_SUMMARY_PROMPT.format(
            language=LANGUAGE_NAMES.get(language, 'English'),
            client_text="\n\n".join(user_turns),
        )
        model = self.model_factory(
            max_tokens=settings.SUMMARY_MAX_TOKENS, temperature=settings.SUMMARY_TEMPERATURE
        ).bind(response_format={"type": "json_object"})
        try:
            reply = model.invoke([HumanMessage(content=prompt)])
        except openai.APIError as e:
            logger.error(f"Client summary generation failed: {e}")
            return ConversationSummary()

        raw = lc_text_from_content(reply.content)
        try:
            return ConversationSummary.model_validate(parse_llm_json(raw))
        except ValueError:
            return ConversationSummary(summary=raw)

    def apply_extraction(
        self,
        conversation: dict,
        extraction: CaseExtraction,
        user_turns: List[str],
        language: str,
    ) -> None:
        """
        Persist an extraction according to the conversation's state.

        - linked case          → overwrite its analysis columns
        - owner, no case       → insert a draft case and link it
        - anonymous, no case   → park the extraction in the conversation metadata

        Errors are logged and swallowed.
        """
        conversation_id = conversation['id']
        try:
            if not conversation['case_id'] and not conversation['user_id']:
                store_conversation_extraction(
                    conversation_id=conversation_id, extracted_data=extraction.model_dump()
                )
                logger.info("Stored anonymous extraction on conversation %s", conversation_id)
                return

            client_summary = self.generate_client_summary(user_turns, language)
            fields = case_fields_from_extraction(extraction, language, client_summary)
            if conversation['case_id']:
                update_draft_case(case_id=conversation['case_id'], fields=case_update_fields(fields))
            else:
                conversation['case_id'] = create_draft_case(
                    conversation_id=conversation_id, user_id=conversation['user_id'], fields=fields
                )
        except Exception:
            logger.exception("Error handling draft case for conversation %s", conversation_id)

    def persist_exchange(
        self,
        conversation_id,
        message: str,
        reply: str,
        user_metadata: dict,
        assistant_metadata: dict,
        received_at: datetime,
    ) -> None:
        """Append both turns; mirror them onto the linked case when there is one."""
        # the reply must sort after the user turn even on coarse clocks
        replied_at = max(utcnow(), received_at + timedelta(microseconds=1))
        case_id = save_exchange(
            conversation_id=conversation_id,
            user_message=message,
            assistant_message=reply,
            user_metadata=user_metadata,
            assistant_metadata=assistant_metadata,
            user_created_at=received_at,
            assistant_created_at=replied_at,
        )
        if not case_id:
            return
        try:
            mirror_case_messages(
                case_id=case_id,
                user_message=message,
                assistant_message=reply,
                user_metadata=user_metadata,
                assistant_metadata=assistant_metadata,
            )
        except Exception:
            logger.exception("Failed to mirror messages onto case %s", case_id)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def run(self, request: ChatRequest) -> ChatResponse:
        """
        Execute the full workflow for one chat request.

        Args:
            request: validated request body.

        Returns:
            ChatResponse; intake-only fields stay None outside intake mode.

        Raises:
            RuntimeError: missing API key.
            ConversationNotFound: `conversation_id` does not exist.
        """
        received_at = utcnow()
        mode, language, message = request.mode, request.language, request.message
        logger.info(
            "Legal chatbot request: mode=%s language=%s conversation=%s length=%d",
            mode, language, request.conversation_id, len(message),
        )

        chat_model = self.model_factory(
            max_tokens=settings.CHAT_MAX_TOKENS, temperature=settings.CHAT_TEMPERATURE
        )

        conversation = None
        if request.conversation_id:
            conversation = get_conversation(conversation_id=request.conversation_id)
            if conversation is None:
                raise ConversationNotFound('Conversation not found or not accessible')
        elif mode in ('qa', 'qa_lawyer'):
            conversation = create_conversation(
                mode=mode,
                language=language,
                lawyer_id=request.lawyerId if mode == 'qa_lawyer' else None,
            )

        history: List[BaseMessage] = []
        if conversation:
            history = self.load_history(conversation['id'])
            logger.info("Loaded chat history with %d messages", len(history))

        knowledge = self.retrieve_knowledge(message, language)
        categories = get_active_case_categories(language=language) if mode == 'intake' else []
        case_context = None
        if mode == 'qa_lawyer' and request.caseId:
            case_context = get_case_context(case_id=request.caseId)

        system_prompt = build_system_prompt(mode, language, knowledge, categories, case_context)
        logger.info(
            "Sending to LLM: prompt length=%d knowledge=%d categories=%d",
            len(system_prompt), len(knowledge), len(categories),
        )
        messages = [SystemMessage(content=system_prompt), *history, HumanMessage(content=message)]

        if mode == 'intake':
            chat_model = chat_model.bind(functions=[EXTRACT_CASE_DATA_FUNCTION], function_call='auto')

        conversation_id = conversation['id'] if conversation else None
        response_id = str(conversation_id) if conversation_id else None
        user_metadata = {'timestamp': received_at.isoformat()}

        try:
            ai_message = chat_model.invoke(messages)
        except openai.APIStatusError as e:
            error_text = e.response.text if e.response is not None else str(e)
            logger.error(f"OpenAI API error ({e.status_code}): {error_text}")
            reply = localized(FALLBACK_MESSAGES, language)
            if conversation_id:
                self.persist_exchange(
                    conversation_id,
                    message,
                    reply,
                    user_metadata,
                    {'timestamp': utcnow().isoformat(), 'mode': mode, 'fallback': True, 'error': error_text},
                    received_at,
                )
            return ChatResponse(
                response=reply,
                conversation_id=response_id,
                conversationId=response_id,
            )

        reply = lc_text_from_content(ai_message.content).strip()
        if not reply:
            reply = localized(FUNCTION_ONLY_REPLIES, language)

        extraction: Extraction = NoExtraction()
        jurisdiction_rejected = False
        if mode == 'intake':
            extraction = parse_extraction(ai_message.additional_kwargs.get('function_call'))
            if isinstance(extraction, NoExtraction) and extraction.reason:
                logger.warning(f"Ignoring extraction: {extraction.reason}")

        if isinstance(extraction, CaseExtraction):
            logger.info("Extracted case data: category=%s urgency=%s", extraction.category, extraction.urgency)
            if settings.ENFORCE_JURISDICTION and not is_within_jurisdiction(extraction.entities.location):
                logger.info("Case declined, location outside jurisdiction: %s", extraction.entities.location)
                reply = localized(JURISDICTION_DECLINE_MESSAGES, language)
                jurisdiction_rejected = True
                extraction = NoExtraction(reason='outside jurisdiction')
            elif conversation:
                user_turns = [turn.content for turn in history if isinstance(turn, HumanMessage)]
                user_turns.append(message)
                self.apply_extraction(conversation, extraction, user_turns, language)

        extracted_data = extraction.model_dump() if isinstance(extraction, CaseExtraction) else None

        if conversation_id:
            assistant_metadata = {'timestamp': utcnow().isoformat(), 'mode': mode}
            if mode == 'intake':
                assistant_metadata['extractedData'] = extracted_data
            if jurisdiction_rejected:
                assistant_metadata['jurisdictionRejected'] = True
            self.persist_exchange(
                conversation_id, message, reply, user_metadata, assistant_metadata, received_at
            )

        response = ChatResponse(
            response=reply,
            conversation_id=response_id,
            conversationId=response_id,
        )
        if jurisdiction_rejected:
            response.jurisdictionRejected = True
        if isinstance(extraction, CaseExtraction):
            response.extractedData = extracted_data
            response.needsPersonalDetails = extraction.needsPersonalDetails
            response.nextQuestions = extraction.nextQuestions or None
        return response


def summarize_case_conversation(
    case_id, client_name: Optional[str] = None, model_factory: ChatModelFactory = build_chat_model
) -> str:
    """
    Write an admin-facing, third-person summary of a case's intake conversation
    and store it on the case.

    Raises:
        CaseNotFound / ConversationNotFound: nothing to summarize.
        openai.APIError: upstream failure (not recovered here).
    """
    transcript = get_case_transcript(case_id=case_id)
    conversation_text = "\n\n".join(f"{turn['role'].upper()}: {turn['content']}" for turn in transcript)

    client_reference = f'"{client_name}"' if client_name else '"the client"'
    model = model_factory(max_tokens=settings.SUMMARY_MAX_TOKENS, temperature=settings.SUMMARY_TEMPERATURE)
    reply = model.invoke([
        SystemMessage(content=CASE_CONVERSATION_SUMMARY_PROMPT.format(client_reference=client_reference)),
        HumanMessage(content=f"Please summarize the following legal intake conversation:\n\n{conversation_text}"),
    ])
    summary = lc_text_from_content(reply.content).strip()
    store_case_summary(case_id=case_id, summary=summary)
    logger.info("Stored conversation summary on case %s", case_id)
    return summary
