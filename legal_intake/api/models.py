"""
Pydantic models used for request/response validation and API data contracts.

Besides the HTTP contracts, this module holds the result of the
``extract_case_data`` function call as an explicit sum type:

- ``NoExtraction``   : the model did not call the function, or its arguments
                       were not valid JSON / did not match the schema
- ``CaseExtraction`` : validated case fields

and the structured ``ConversationSummary`` produced by the summary generator.
"""

from typing import List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

ChatMode = Literal['intake', 'qa', 'qa_lawyer']
Urgency = Literal['low', 'medium', 'high', 'emergency']


class ChatRequest(BaseModel):
    """
    Body of ``POST /legal-chatbot``.
    """
    message: str = Field(..., description="The new user message.")
    conversation_id: Optional[str] = Field(None, description="Conversation to continue; history is loaded and the exchange persisted.")
    mode: ChatMode = Field('intake', description="Flow selector.")
    language: str = Field('en', description="Reply language code (en, ar, de).")
    caseId: Optional[str] = Field(None, description="Case giving context to a lawyer Q&A session.")
    lawyerId: Optional[str] = Field(None, description="Lawyer owning a new qa_lawyer conversation.")


class ChatResponse(BaseModel):
    """
    Body returned by ``POST /legal-chatbot``. Optional keys are omitted
    from the JSON when unset.
    """
    response: str
    """The assistant reply shown to the user."""
    extractedData: Optional[dict] = None
    """Validated extraction (intake mode only)."""
    needsPersonalDetails: Optional[bool] = None
    """Whether contact details still have to be collected (intake mode only)."""
    nextQuestions: Optional[List[str]] = None
    """Follow-up questions proposed by the model (intake mode only)."""
    jurisdictionRejected: Optional[bool] = None
    """Set when the extraction pointed outside the served jurisdiction."""
    conversation_id: Optional[str] = None
    """Conversation the exchange belongs to (new id for bootstrapped Q&A sessions)."""
    conversationId: Optional[str] = None
    """Same value as `conversation_id`, for older clients."""


class CaseEntities(BaseModel):
    model_config = ConfigDict(extra='ignore')

    parties: List[str] = Field(default_factory=list)
    dates: List[str] = Field(default_factory=list)
    location: Optional[str] = None


class LegalClassification(BaseModel):
    model_config = ConfigDict(extra='ignore')

    area: Optional[str] = None
    subArea: Optional[str] = None
    applicableLaws: List[str] = Field(default_factory=list)


class CaseExtraction(BaseModel):
    """
    Case fields emitted by the model through ``extract_case_data``.

    ``needsPersonalDetails`` is also accepted under its older name
    ``personalDetailsNeeded``.
    """
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    category: str = Field(..., min_length=1)
    urgency: Urgency
    summary: str
    entities: CaseEntities = Field(default_factory=CaseEntities)
    legalClassification: LegalClassification = Field(default_factory=LegalClassification)
    violationTypes: List[str] = Field(default_factory=list)
    remedies: List[str] = Field(default_factory=list)
    complexityScore: Optional[int] = Field(None, ge=1, le=10)
    needsPersonalDetails: Optional[bool] = Field(
        None, validation_alias=AliasChoices('needsPersonalDetails', 'personalDetailsNeeded')
    )
    readyForNextStep: Optional[bool] = None
    nextQuestions: List[str] = Field(default_factory=list)


class NoExtraction(BaseModel):
    """The model produced no usable extraction."""
    reason: Optional[str] = None


Extraction = Union[NoExtraction, CaseExtraction]


class ConversationSummary(BaseModel):
    """
    Structured summary of the client's turns, stored on the draft case as
    ``client_responses_summary``.
    """
    model_config = ConfigDict(extra='ignore')

    summary: str = ''
    keyPoints: List[str] = Field(default_factory=list)
    urgencyIndicators: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
    mentionedDocuments: List[str] = Field(default_factory=list)
    # models often return {"date": ..., "event": ...} entries here
    timeline: List[Union[str, dict]] = Field(default_factory=list)
    parties: List[Union[str, dict]] = Field(default_factory=list)


class CaseSummaryRequest(BaseModel):
    """Body of ``POST /generate-conversation-summary``."""
    caseId: Optional[str] = None
    clientName: Optional[str] = None
