"""
Prompt Construction for the Intake / Q&A Assistant
==================================================

Purpose
-------
Static prompt material and the small helpers that assemble it:

- localized instruction templates for the three conversation modes
  (``intake``, ``qa``, ``qa_lawyer``)
- rendering of retrieved legal-knowledge entries, case categories and
  lawyer case context into prompt sections
- the ``extract_case_data`` function schema offered to the model in intake mode
- canned replies: upstream-failure apology, function-call-only acknowledgement,
  jurisdiction decline
- naive keyword extraction for the knowledge lookup
- the location screen used to decline out-of-jurisdiction matters

Nothing here validates its inputs: empty knowledge or category lists simply
render as empty sections.
"""

import re
from typing import Dict, List, Optional

DEFAULT_LANGUAGE = 'en'


def localized(texts: Dict[str, str], language: str) -> str:
    """Pick the text for `language`, falling back to English."""
    return texts.get(language) or texts[DEFAULT_LANGUAGE]


# ---------------------------------------------------------------------------
# Canned replies
# ---------------------------------------------------------------------------

FALLBACK_MESSAGES = {
    'en': "I apologize, but I'm experiencing temporary technical difficulties. Please share: your full name, best email address, phone number, and a brief description of your legal matter so I can assist you.",
    'ar': "أعتذر، أواجه صعوبة تقنية مؤقتة. يرجى مشاركة: اسمك الكامل، أفضل بريد إلكتروني، رقم هاتف، ووصف مختصر لحالتك القانونية حتى أتمكن من مساعدتك.",
    'de': "Entschuldigung, ich habe momentan technische Schwierigkeiten. Bitte teilen Sie mit: Ihren vollständigen Namen, beste E-Mail-Adresse, Telefonnummer und eine kurze Beschreibung Ihres Rechtsfalls, damit ich Ihnen helfen kann.",
}
"""Reply used when the completion API answers with a non-2xx status."""

FUNCTION_ONLY_REPLIES = {
    'en': "Thank you, I will now ask a few questions to clarify the details.",
    'ar': "شكراً لك، سأقوم الآن بطرح بعض الأسئلة لتوضيح التفاصيل.",
    'de': "Danke, ich stelle nun einige Fragen, um Details zu klären.",
}
"""Reply used when the model only called the extraction function."""

JURISDICTION_DECLINE_MESSAGES = {
    'en': (
        "Thank you for reaching out. Our firm only takes on matters that fall under Egyptian jurisdiction, "
        "and your matter involves another country, so we are unable to help with this case.\n\n"
        "Please contact a lawyer licensed where your matter is located; your local bar association or a "
        "legal directory can point you to one.\n\n"
        "Thank you for your understanding, and good luck resolving your matter."
    ),
    'ar': (
        "شكراً لتواصلك معنا. يقتصر عمل مكتبنا على القضايا الخاضعة للولاية القضائية المصرية، "
        "وبما أن مسألتك تتعلق بدولة أخرى فلا يمكننا مساعدتك في هذه القضية.\n\n"
        "ننصحك بالتواصل مع محامٍ مرخص في البلد الذي تقع فيه مسألتك، ويمكن لنقابة المحامين المحلية "
        "أو الأدلة القانونية مساعدتك في العثور عليه.\n\n"
        "شكراً لتفهمك، ونتمنى لك التوفيق."
    ),
    'de': (
        "Vielen Dank für Ihre Anfrage. Unsere Kanzlei übernimmt ausschließlich Angelegenheiten unter "
        "ägyptischer Gerichtsbarkeit. Da Ihr Anliegen ein anderes Land betrifft, können wir Ihnen bei "
        "diesem Fall leider nicht helfen.\n\n"
        "Bitte wenden Sie sich an einen vor Ort zugelassenen Anwalt; Ihre örtliche Anwaltskammer oder ein "
        "Anwaltsverzeichnis hilft Ihnen dabei.\n\n"
        "Vielen Dank für Ihr Verständnis."
    ),
}


# ---------------------------------------------------------------------------
# Mode instructions
# ---------------------------------------------------------------------------

INTAKE_INSTRUCTIONS = {
    'en': """You are a professional legal intake specialist for a law firm that operates ONLY in Egypt.

GOALS
1. Right after greeting, ask where the user is located and which country the legal matter involves.
2. If the matter is not in Egypt, politely explain that the firm only handles Egyptian matters and suggest local counsel.
3. For Egyptian matters, gather the facts professionally:
   - Ask direct, factual questions; never ask about feelings.
   - Determine the case category yourself from the description and never ask the user to confirm it
     (property disputes = "Real Estate", divorce = "Marriage/Divorce", visas = "Visas/Residency",
     employment disputes = "Employment Law", criminal charges = "Criminal Law").
   - Capture the parties, important dates, location within Egypt and urgency.
   - Identify the legal area, likely violation types and remedies the client could seek.
   - Ask one or two questions at a time about what happened, when, who was involved and the outcome sought.
4. Call extract_case_data as soon as you can determine the category, urgency and a summary, and call it again
   whenever you learn something new. Set readyForNextStep once category, summary, urgency and the key
   parties/dates are known, and needsPersonalDetails while contact details are still missing.

DISCLAIMER: remind the user that you do not give legal advice; you gather information for lawyers to review,
and services are limited to Egyptian jurisdiction.""",

    'ar': """أنت أخصائي استقبال قانوني محترف لمكتب محاماة يعمل في مصر فقط.

الأهداف
1. بعد الترحيب مباشرة، اسأل المستخدم عن مكان إقامته والدولة التي تتعلق بها مسألته القانونية.
2. إذا لم تكن المسألة في مصر، وضّح بلطف أن المكتب يتعامل مع القضايا المصرية فقط واقترح الاستعانة بمحامٍ محلي.
3. للقضايا المصرية، اجمع الوقائع بمهنية:
   - اطرح أسئلة مباشرة وواقعية ولا تسأل عن المشاعر.
   - حدّد فئة القضية بنفسك من الوصف ولا تطلب من المستخدم تأكيدها.
   - استخرج الأطراف والتواريخ المهمة والموقع داخل مصر ومستوى الإلحاح.
   - حدّد المجال القانوني وأنواع المخالفات المحتملة وسبل الانتصاف الممكنة.
   - اطرح سؤالاً أو سؤالين في كل مرة.
4. استدعِ extract_case_data بمجرد معرفة الفئة والإلحاح والملخص، وكرر ذلك كلما عرفت معلومات جديدة.
   اضبط readyForNextStep عند اكتمال المعلومات، وneedsPersonalDetails ما دامت بيانات الاتصال ناقصة.

تنبيه: ذكّر المستخدم بأنك لا تقدم استشارة قانونية بل تجمع المعلومات لمراجعة المحامين، وأن الخدمة مقتصرة على مصر.""",

    'de': """Sie sind ein professioneller juristischer Aufnahmespezialist einer Kanzlei, die ausschließlich in Ägypten tätig ist.

ZIELE
1. Fragen Sie direkt nach der Begrüßung, wo sich der Nutzer befindet und welches Land die Angelegenheit betrifft.
2. Liegt die Angelegenheit nicht in Ägypten, erklären Sie höflich, dass die Kanzlei nur ägyptische Fälle betreut.
3. Sammeln Sie bei ägyptischen Fällen sachlich die Fakten:
   - Stellen Sie direkte, sachliche Fragen, niemals nach Gefühlen.
   - Bestimmen Sie die Fallkategorie selbst und lassen Sie sie nicht bestätigen.
   - Erfassen Sie Beteiligte, wichtige Daten, den Ort in Ägypten und die Dringlichkeit.
   - Bestimmen Sie Rechtsgebiet, mögliche Verstöße und Rechtsbehelfe.
   - Stellen Sie jeweils ein oder zwei Fragen.
4. Rufen Sie extract_case_data auf, sobald Kategorie, Dringlichkeit und Zusammenfassung feststehen, und erneut bei
   neuen Informationen. Setzen Sie readyForNextStep bei vollständigen Angaben und needsPersonalDetails, solange
   Kontaktdaten fehlen.

HINWEIS: Erinnern Sie daran, dass Sie keine Rechtsberatung geben, sondern Informationen für Anwälte sammeln.""",
}

QA_INSTRUCTIONS = {
    'en': "You are a helpful AI assistant providing brief legal information about Egyptian law. Keep responses to 2-3 sentences maximum. Be concise and direct. Always mention this is not legal advice - consult a qualified Egyptian lawyer for specific cases.",
    'ar': "أنت مساعد ذكي يقدم معلومات قانونية مختصرة عن القانون المصري. احتفظ بالإجابات في 2-3 جمل كحد أقصى. كن مختصراً ومباشراً. اذكر دائماً أن هذه ليست استشارة قانونية - استشر محامياً مصرياً مؤهلاً للحالات المحددة.",
    'de': "Sie sind ein hilfreicher KI-Assistent, der kurze Rechtsinformationen zum ägyptischen Recht bereitstellt. Halten Sie Antworten auf maximal 2-3 Sätze. Seien Sie prägnant und direkt. Erwähnen Sie immer, dass dies keine Rechtsberatung ist - konsultieren Sie einen qualifizierten ägyptischen Anwalt für spezielle Fälle.",
}

QA_LAWYER_INSTRUCTIONS = {
    'en': """You are a legal research assistant supporting a licensed Egyptian lawyer.
- Answer precisely and cite the relevant Egyptian laws and article numbers when you know them.
- Point out procedural deadlines, competent courts and evidentiary requirements where relevant.
- If the reference material below does not cover the question, say so instead of guessing.
- Keep answers focused; use short lists for multi-step procedures.""",
    'ar': """أنت مساعد بحث قانوني يدعم محامياً مصرياً مرخصاً.
- أجب بدقة واذكر القوانين المصرية وأرقام المواد ذات الصلة عند معرفتها.
- نبّه إلى المواعيد الإجرائية والمحاكم المختصة ومتطلبات الإثبات عند الحاجة.
- إذا لم تغطِّ المراجع أدناه السؤال، فصرّح بذلك بدلاً من التخمين.
- اجعل الإجابات مركزة واستخدم قوائم قصيرة للإجراءات متعددة الخطوات.""",
    'de': """Sie sind ein juristischer Rechercheassistent für einen zugelassenen ägyptischen Anwalt.
- Antworten Sie präzise und nennen Sie einschlägige ägyptische Gesetze und Artikelnummern, soweit bekannt.
- Weisen Sie auf Verfahrensfristen, zuständige Gerichte und Beweisanforderungen hin.
- Wenn das Referenzmaterial unten die Frage nicht abdeckt, sagen Sie das, statt zu raten.
- Halten Sie Antworten fokussiert; nutzen Sie kurze Listen für mehrstufige Verfahren.""",
}

MODE_INSTRUCTIONS = {
    'intake': INTAKE_INSTRUCTIONS,
    'qa': QA_INSTRUCTIONS,
    'qa_lawyer': QA_LAWYER_INSTRUCTIONS,
}


# ---------------------------------------------------------------------------
# Function schema
# ---------------------------------------------------------------------------

EXTRACT_CASE_DATA_FUNCTION = {
    'name': 'extract_case_data',
    'description': (
        'Extract and structure the case information gathered so far. Call this once the case category can be '
        'determined and again whenever new facts are learned. Only extract cases within Egypt.'
    ),
    'parameters': {
        'type': 'object',
        'properties': {
            'category': {
                'type': 'string',
                'description': 'Legal category determined from context (e.g. Marriage/Divorce, Visas/Residency, Real Estate, Business Law, Criminal Law). Never ask the user to confirm it.',
            },
            'urgency': {
                'type': 'string',
                'enum': ['low', 'medium', 'high', 'emergency'],
                'description': 'Urgency level of the case',
            },
            'summary': {
                'type': 'string',
                'description': 'Brief summary of the legal matter for admin review',
            },
            'entities': {
                'type': 'object',
                'properties': {
                    'parties': {'type': 'array', 'items': {'type': 'string'}, 'description': 'Parties involved in the case'},
                    'dates': {'type': 'array', 'items': {'type': 'string'}, 'description': 'Important dates mentioned'},
                    'location': {'type': 'string', 'description': 'Location relevant to the case; must be within Egypt'},
                },
            },
            'legalClassification': {
                'type': 'object',
                'properties': {
                    'area': {'type': 'string', 'description': 'Primary area of law'},
                    'subArea': {'type': 'string', 'description': 'More specific sub-area'},
                    'applicableLaws': {'type': 'array', 'items': {'type': 'string'}, 'description': 'Laws or articles likely to apply'},
                },
            },
            'violationTypes': {
                'type': 'array',
                'items': {'type': 'string'},
                'description': 'Kinds of violations or breaches described',
            },
            'remedies': {
                'type': 'array',
                'items': {'type': 'string'},
                'description': 'Remedies or outcomes the client could pursue',
            },
            'complexityScore': {
                'type': 'integer',
                'minimum': 1,
                'maximum': 10,
                'description': 'Estimated case complexity from 1 (simple) to 10 (very complex)',
            },
            'needsPersonalDetails': {
                'type': 'boolean',
                'description': 'Whether personal contact details still need to be collected',
            },
            'readyForNextStep': {
                'type': 'boolean',
                'description': 'True when enough case information has been gathered to move on to personal details',
            },
            'nextQuestions': {
                'type': 'array',
                'items': {'type': 'string'},
                'description': 'The next one or two questions to ask the client',
            },
        },
        'required': ['category', 'urgency', 'summary'],
    },
}


# ---------------------------------------------------------------------------
# Summary prompts
# ---------------------------------------------------------------------------

CLIENT_RESPONSES_SUMMARY_PROMPT = """You are a legal intake analyst. Summarize what the client has told us so far.

Return ONLY a JSON object with exactly these keys:
{{
  "summary": "one paragraph, neutral third person",
  "keyPoints": ["..."],
  "urgencyIndicators": ["deadlines, threats, ongoing harm"],
  "goals": ["what the client wants to achieve"],
  "mentionedDocuments": ["contracts, receipts, notices ..."],
  "timeline": ["date or period - event"],
  "parties": ["people or organisations involved"]
}}
Use empty lists when nothing applies. Do not invent facts.

Write the values in this language: {language}

CLIENT MESSAGES:
{client_text}
"""

CASE_CONVERSATION_SUMMARY_PROMPT = """You are a legal assistant summarizing conversations between clients and an AI intake assistant. Write one concise, professional paragraph that captures:
- the main legal issue
- key facts and circumstances
- important dates, parties or documents
- the client's primary concerns or goals
- any urgent matters or deadlines

Write in neutral third person about the client and refer to them as {client_reference}; never use "you" or "your". The summary is for admin review, not for the client.

Keep it factual and clear enough for a legal professional to understand the case quickly."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_WORD_RE = re.compile(r"\w+", re.UNICODE)


def extract_keywords(message: str, max_keywords: int = 5, min_length: int = 4) -> List[str]:
    """
    Naive keyword set for the knowledge lookup.

    Returns up to `max_keywords` distinct words of at least `min_length`
    characters, in order of appearance, lower-cased.
    """
    keywords: List[str] = []
    for word in _WORD_RE.findall(message or ""):
        word = word.lower()
        if len(word) < min_length or word.isdigit() or word in keywords:
            continue
        keywords.append(word)
        if len(keywords) == max_keywords:
            break
    return keywords


def build_knowledge_section(entries: List[dict]) -> str:
    lines = []
    for entry in entries or []:
        reference = entry.get('law_reference') or ''
        if entry.get('article_number'):
            reference = f"{reference} art. {entry['article_number']}".strip()
        header = f"- {entry.get('title', '')}"
        if reference:
            header += f" ({reference})"
        lines.append(f"{header}: {entry.get('content', '')}")
    return "\n".join(lines)


def build_categories_section(categories: List[dict]) -> str:
    return ", ".join(category.get('display_name') or category.get('name', '') for category in categories or [])


def build_case_context_section(case_context: Optional[dict]) -> str:
    if not case_context:
        return ""
    parts = [
        f"Case number: {case_context.get('case_number') or ''}",
        f"Category: {case_context.get('category') or ''}",
        f"Urgency: {case_context.get('urgency') or ''}",
        f"Description: {case_context.get('description') or ''}",
    ]
    if case_context.get('ai_summary'):
        parts.append(f"Summary: {case_context['ai_summary']}")
    return "\n".join(parts)


def build_system_prompt(
    mode: str,
    language: str,
    knowledge: List[dict],
    categories: Optional[List[dict]] = None,
    case_context: Optional[dict] = None,
) -> str:
    """
    Assemble the system prompt for one request.

    Parameters
    ----------
    mode : str
        ``intake`` | ``qa`` | ``qa_lawyer``; unknown modes use the intake template.
    language : str
        Reply language code; unknown codes use English.
    knowledge : list[dict]
        Retrieved legal-knowledge entries.
    categories : list[dict] | None
        Active case categories (intake mode only).
    case_context : dict | None
        Case fields for lawyer Q&A.

    Returns
    -------
    str
        Instructions followed by the reference sections.
    """
    instructions = localized(MODE_INSTRUCTIONS.get(mode, INTAKE_INSTRUCTIONS), language)
    sections = [instructions]
    sections.append(f"RELEVANT LEGAL KNOWLEDGE:\n{build_knowledge_section(knowledge)}")
    if mode == 'intake':
        sections.append(f"AVAILABLE CASE CATEGORIES:\n{build_categories_section(categories)}")
    if mode == 'qa_lawyer' and case_context:
        sections.append(f"CASE CONTEXT:\n{build_case_context_section(case_context)}")
    return "\n\n".join(sections)


SERVED_LOCATION_KEYWORDS = [
    'egypt', 'egyptian', 'cairo', 'alexandria', 'giza', 'luxor', 'aswan', 'hurghada', 'sharm',
    'port said', 'suez', 'tanta', 'minya', 'mansoura', 'ismailia',
    'مصر', 'القاهرة', 'الاسكندرية', 'الإسكندرية', 'الجيزة', 'الأقصر', 'أسوان', 'الغردقة', 'شرم الشيخ',
    'بورسعيد', 'السويس', 'طنطا', 'المنيا',
    'ägypten', 'kairo',
]

FOREIGN_LOCATION_KEYWORDS = [
    'kuwait', 'saudi', 'uae', 'emirates', 'dubai', 'qatar', 'bahrain', 'oman',
    'jordan', 'lebanon', 'syria', 'iraq', 'morocco', 'tunisia', 'algeria',
    'libya', 'sudan', 'usa', 'united states', 'america', 'united kingdom', 'britain', 'england',
    'france', 'germany', 'deutschland', 'frankreich',
    'الكويت', 'السعودية', 'الإمارات', 'قطر', 'البحرين', 'عمان',
    'الأردن', 'لبنان', 'سوريا', 'العراق', 'المغرب', 'تونس', 'الجزائر',
    'ليبيا', 'السودان',
]

_LATIN_TOKEN_RE = re.compile(r"[a-zäöüß]+")


def _mentions(location: str, keyword: str) -> bool:
    # Short latin keywords ("uk", "uae", "usa") must match whole tokens.
    if keyword.isascii() and ' ' not in keyword and len(keyword) <= 4:
        return keyword in _LATIN_TOKEN_RE.findall(location)
    return keyword in location


def is_within_jurisdiction(location: Optional[str]) -> bool:
    """
    Screen an extracted location.

    A location that names the served jurisdiction is accepted; one that names
    a foreign country (and not the served one) is declined. Missing or
    unrecognized locations are accepted and left to the reviewing admin.
    """
    if not location:
        return True
    location = location.lower()
    if any(_mentions(location, keyword) for keyword in SERVED_LOCATION_KEYWORDS):
        return True
    return not any(_mentions(location, keyword) for keyword in FOREIGN_LOCATION_KEYWORDS)
