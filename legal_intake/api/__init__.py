"""
API Package — FastAPI Router • Models • Prompts • Intake Pipeline
=================================================================

Mission
-------
This package defines the service's HTTP interface and the AI intake workflow
behind it: a visitor describes a legal problem, the assistant answers in the
visitor's language (English, Arabic or German), and once the model has enough
facts it emits a structured case extraction that becomes a draft case.

Contents
--------
- fast_api
    FastAPI router with endpoints for:
      • POST /legal-chatbot: one chat turn (intake, qa or qa_lawyer mode)
      • POST /generate-conversation-summary: third-person summary of a case's
        intake conversation, stored on the case
      • GET /health
    Every response carries permissive CORS headers; failures answer 500 {error}.

- models
    Pydantic data contracts:
      • ChatRequest / ChatResponse
      • CaseExtraction | NoExtraction (result of the extract_case_data call)
      • ConversationSummary, CaseSummaryRequest

- llm_pipeline
    `IntakePipeline`: history → knowledge lookup → prompt → LLM → extraction →
    draft case → persistence, plus `summarize_case_conversation`.

- prompt_utilities
    Mode instructions, the extract_case_data function schema, localized canned
    replies, keyword extraction and the jurisdiction screen.

- utils
    LangChain content normalisation and tolerant JSON parsing (json_repair).

Operational Notes
-----------------
- Retries against the LLM are disabled; upstream errors become a localized
  apology that is still persisted.
- Draft-case writes are best-effort: the reply is returned even if they fail.
"""
