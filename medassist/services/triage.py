"""Critical-symptom gate.

Symptoms matching any phrase in CRITICAL_SYMPTOMS bypass the model entirely
and get a fixed, localized referral to emergency care.
"""

from datetime import datetime, timezone
from typing import Dict

from medassist.schemas.diagnosis import EmergencyResponse, PatientInput

CRITICAL_SYMPTOMS = [
    "chest pain",
    "difficulty breathing",
    "severe bleeding",
    "unconscious",
    "seizure",
    "stroke symptoms",
    "heart attack",
    "severe trauma",
    "poisoning",
]

EMERGENCY_MESSAGES: Dict[str, Dict] = {
    "en": {
        "title": "🚨 EMERGENCY: Refer to emergency medical care immediately",
        "critical": "CRITICAL SYMPTOMS DETECTED:",
        "action_title": "IMMEDIATE ACTION REQUIRED:",
        "actions": [
            "Call emergency services (911/112)",
            "Do not wait for AI diagnosis",
            "Seek immediate medical attention",
        ],
        "tail": "This is a medical emergency that requires immediate professional medical care.",
    },
    "hi": {
        "title": "🚨 आपातकाल: तुरंत आपातकालीन चिकित्सा सहायता लें",
        "critical": "गंभीर लक्षण पाए गए:",
        "action_title": "तत्काल आवश्यक कार्रवाई:",
        "actions": [
            "आपातकालीन सेवा (112/108) पर कॉल करें",
            "एआई निदान का इंतजार न करें",
            "तुरंत चिकित्सकीय सहायता लें",
        ],
        "tail": "यह एक चिकित्सा आपातकाल है जिसके लिए तुरंत डॉक्टर की आवश्यकता है।",
    },
    "mr": {
        "title": "🚨 आपत्काल: तात्काळ आपत्कालीन वैद्यकीय मदत घ्या",
        "critical": "गंभीर लक्षण आढळले:",
        "action_title": "तात्काळ आवश्यक कृती:",
        "actions": [
            "आपत्कालीन सेवांना कॉल करा (112/108)",
            "एआय निदानाची प्रतीक्षा करू नका",
            "तात्काळ वैद्यकीय मदत घ्या",
        ],
        "tail": "हा वैद्यकीय आपत्काल आहे ज्यासाठी तातडीने डॉक्टरांची गरज आहे.",
    },
}


def has_critical_symptoms(symptoms: str) -> bool:
    """Return True if any critical phrase occurs in the symptoms text."""
    text = (symptoms or "").lower()
    return any(phrase in text for phrase in CRITICAL_SYMPTOMS)


def emergency_message(symptoms: str, lang: str = "en") -> str:
    em = EMERGENCY_MESSAGES.get(lang) or EMERGENCY_MESSAGES["en"]
    actions = "\n".join(f"- {action}" for action in em["actions"])
    return (
        f"{em['title']}\n\n"
        f"⚠️ {em['critical']}\n"
        f"{symptoms}\n\n"
        f"🚑 {em['action_title']}\n"
        f"{actions}\n\n"
        f"{em['tail']}"
    )


def build_emergency_response(patient: PatientInput) -> EmergencyResponse:
    return EmergencyResponse(
        diagnosis=emergency_message(patient.symptoms, patient.lang),
        timestamp=datetime.now(timezone.utc),
    )
