from datetime import date, datetime, timezone
from typing import Optional
from textwrap import dedent
import logging
import re

from medassist.errors import DiagnosisGenerationError
from medassist.schemas.diagnosis import DiagnosisResult, PatientInput
from medassist.services.llm_service import LLMService

logger = logging.getLogger(__name__)

LANGUAGES = {"en": "English", "hi": "Hindi", "mr": "Marathi"}

# Machine-readable line the prompt asks for; digits are ASCII only
CONFIDENCE_MARKER = re.compile(
    r"CONFIDENCE_PERCENT\s*=\s*(\d{1,3})", re.IGNORECASE | re.ASCII
)

# Fallback: a "confidence" label in English, Hindi or Marathi followed by a percentage
CONFIDENCE_LABEL = re.compile(
    r"(Confidence|Confidence\s*Level|आत्मविश्वास|विश्वास|विश्वास\s*पातळी)[^\d]{0,15}(\d{1,3})%",
    re.IGNORECASE | re.ASCII,
)

EMERGENCY_WORD = re.compile(r"\bemergency:")

# Only the start of the reply is checked for emergency markers
EMERGENCY_HEAD_CHARS = 200

REFERRAL_KEYWORDS = ["refer to provider", "consult doctor", "medical attention"]

GENERATION_FAILED = "Failed to generate diagnosis. Please try again."


PROMPT_TEMPLATE = dedent(
    """\
        You are a medical AI assistant. Analyze the following patient information and provide a safe, evidence-based medical assessment.

        Respond entirely in {language}. Use medically appropriate terminology for {language}. If any headings or table labels are used, translate them to {language} as well.

        PATIENT INFORMATION:
        - Name: {name}
        - Age: {age} years
        - Sex: {sex}
        - Weight: {weight} kg
        - Allergies: {allergies_reported}
        - Symptoms: {symptoms}

        IMPORTANT SAFETY RULES:
        1. NEVER make final prescriptions for critical or life-threatening cases
        2. ALWAYS flag dangerous symptoms that require immediate medical attention
        3. Only recommend medications backed by WHO/FDA guidelines
        4. Include confidence levels for all assessments
        5. Emphasize this is for informational purposes only

        Please provide a response in this exact format (and translate all headings and column names to {language}).

        When suggesting medications, follow these extra rules:
        • If multiple clinically appropriate formulations exist (e.g., tablet/syrup, cream/ointment/gel, eye/ear/nasal drops, inhaler), provide 2–4 best options as separate rows in the medications table.
        • Tailor route and dose by age/weight and the reported symptoms.
        • Prefer generic names; include brand name in parentheses only if commonly used.
        • If topical forms (creams/ointments) or drops are relevant, list them explicitly with correct route (e.g., topical, ocular, otic, nasal) and frequency.

        Provide the response in the following structure:

        📄 Prescription Summary

        👤 Patient Information:
        Name: {name}
        Age: {age}
        Sex: {sex}
        Weight: {weight} kg
        Allergies: {allergies}

        🩺 Symptoms Reported:
        {symptoms}

        🧠 Diagnosis:
        [Your diagnosis here]

        # MACHINE-READABLE: On a separate line include exactly:
        CONFIDENCE_PERCENT=[percentage without % sign]

        💊 Medications:
        | Medication     | Dose       | Route       | Frequency                  | Duration / Max Dose  |
        |----------------|------------|-------------|----------------------------|---------------------|
        | [Medication]   | [Dose]     | [Route]     | [Frequency]                | [Duration/Max Dose] |

        ⚠️ Warnings and Precautions:
        - [Red flag symptom 1]
        - [Red flag symptom 2]
        - [Red flag symptom 3]
        - [Red flag symptom 4]
        - [Red flag symptom 5]

        📅 Date: {today}

        ---

        ⚠️ Disclaimer:
        This prescription summary is for informational purposes only and does not replace professional medical advice. Please consult a qualified healthcare provider for diagnosis and treatment.

        CRITICAL: If you detect any life-threatening symptoms, immediately add "🚨 EMERGENCY: Refer to emergency medical care immediately" at the top."""
)


def build_medical_prompt(patient: PatientInput, today: Optional[date] = None) -> str:
    """Build the prompt asking the model for a structured prescription summary."""
    language = LANGUAGES.get(patient.lang, "English")
    today = today or datetime.now(timezone.utc).date()
    weight = f"{patient.weight:g}"

    return PROMPT_TEMPLATE.format(
        language=language,
        name=patient.full_name,
        age=patient.age,
        sex=patient.sex,
        weight=weight,
        allergies_reported=patient.allergies or "None reported",
        allergies=patient.allergies or "None",
        symptoms=patient.symptoms,
        today=today.isoformat(),
    )


def parse_confidence(text: str) -> int:
    match = CONFIDENCE_MARKER.search(text)
    if match:
        value = int(match.group(1))
    else:
        match = CONFIDENCE_LABEL.search(text)
        value = int(match.group(2)) if match else 0
    return max(0, min(100, value))


def is_emergency_reply(text: str) -> bool:
    """An emergency is flagged only when signalled at the top of the reply."""
    if text.lstrip().startswith("🚨"):
        return True
    head = text[:EMERGENCY_HEAD_CHARS].lower()
    return bool(EMERGENCY_WORD.search(head)) or "refer to emergency medical care" in head


def needs_referral(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in REFERRAL_KEYWORDS)


def parse_diagnosis(text: str) -> DiagnosisResult:
    """Extract confidence, emergency and referral flags from a free-text reply."""
    return DiagnosisResult(
        diagnosis=text,
        confidence=parse_confidence(text),
        is_emergency=is_emergency_reply(text),
        needs_referral=needs_referral(text),
        timestamp=datetime.now(timezone.utc),
    )


class DiagnosisService:
    """Turns patient intake data into a parsed model diagnosis."""

    def __init__(self, llm_service: Optional[LLMService] = None):
        self._llm_service = llm_service

    @property
    def llm_service(self) -> LLMService:
        # Created on first use so the emergency path works without an API key
        if self._llm_service is None:
            self._llm_service = LLMService()
        return self._llm_service

    async def generate_diagnosis(self, patient: PatientInput) -> DiagnosisResult:
        prompt = build_medical_prompt(patient)
        result = await self.llm_service.process_prompt(user_prompt=prompt)
        if result.error:
            logger.error(f"LLM API error: {result.error}")
            raise DiagnosisGenerationError(GENERATION_FAILED)
        return parse_diagnosis(result.content)
