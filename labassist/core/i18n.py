"""
Localization

Static key -> string table for the supported display languages
(English, Hindi, Telugu).  ``lookup`` falls back to English when a
language has no entry for a key (most unit strings have no Telugu entry).
"""

from __future__ import annotations

import logging

from labassist.core.errors import UnsupportedLanguageError

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
LANGUAGES: tuple[str, ...] = ("en", "hi", "te")

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "hi": "हिंदी",
    "te": "తెలుగు",
}

# BCP-47 codes for the client's speech recogniser
SPEECH_LANG_CODES: dict[str, str] = {
    "en": "en-US",
    "hi": "hi-IN",
    "te": "te-IN",
}


TRANSLATIONS: dict[str, dict[str, str]] = {
    # ── Dashboard ────────────────────────────────────────────────────────
    "appName": {"en": "Lab Report AI", "hi": "लैब रिपोर्ट AI", "te": "లాబ్ రిపోర్ట్ AI"},
    "yourLabResults": {"en": "Your Lab Results", "hi": "आपके लैब परिणाम", "te": "మీ లాబ్ ఫలితాలు"},
    "reportDate": {"en": "Report Date", "hi": "रिपोर्ट दिनांक", "te": "రిపోర్ట్ తేదీ"},
    "overallInsight": {"en": "Overall Insight", "hi": "समग्र जानकारी", "te": "మొత్తం అంతర్దృష్టి"},
    "healthStability": {"en": "Health Stability", "hi": "स्वास्थ्य स्थिरता", "te": "ఆరోగ్య స్థిరత"},
    "score": {"en": "Score", "hi": "स्कोर", "te": "స్కోర్"},
    "riskLevel": {"en": "Risk Level", "hi": "जोखिम स्तर", "te": "జోఖిమ స్థాయి"},
    "testResults": {"en": "Test Results", "hi": "परीक्षण परिणाम", "te": "పరీక్ష ఫలితాలు"},
    "normalRange": {"en": "Normal range", "hi": "सामान्य सीमा", "te": "సాధారణ పరిధి"},
    "patternInsights": {"en": "Pattern Insights", "hi": "पैटर्न अंतर्दृष्टि", "te": "నమూనా అంతర్దృష్టులు"},
    "possibleCauses": {"en": "Possible Causes", "hi": "संभावित कारण", "te": "సాధ్యమైన కారణాలు"},
    "suggestedIntakes": {
        "en": "Suggested Dietary Intakes",
        "hi": "सुझाए गए आहार/पूरक",
        "te": "సూచించిన ఆహారం/సప్లిమెంట్లు",
    },
    "medicalDisclaimer": {"en": "Medical Disclaimer", "hi": "चिकित्सा अस्वीकरण", "te": "వైద్య నిరాకరణ"},
    "disclaimerText": {
        "en": (
            "This report analysis is generated by AI for educational and informational "
            "purposes only. It is not a substitute for professional medical advice, "
            "diagnosis, or treatment."
        ),
        "hi": (
            "यह रिपोर्ट विश्लेषण केवल शैक्षणिक और सूचनात्मक उद्देश्यों के लिए AI द्वारा तैयार "
            "किया गया है। यह पेशेवर चिकित्सा सलाह का विकल्प नहीं है।"
        ),
        "te": (
            "ఈ రిపోర్ట్ విశ్లేషణ విద్యా మరియు సమాచార ప్రయోజనాల కోసం AI చే రూపొందించబడింది. "
            "ఇది వృత్తిపరమైన వైద్య సలహాకు ప్రత్యామ్నాయం కాదు."
        ),
    },

    # ── Upload ───────────────────────────────────────────────────────────
    "uploadTitle": {"en": "Upload Lab Report", "hi": "लैब रिपोर्ट अपलोड करें", "te": "ల్యాబ్ రిపోర్ట్ అప్‌లోడ్ చేయండి"},
    "analyzing": {"en": "Analyzing report...", "hi": "रिपोर्ट का विश्लेषण...", "te": "రిపోర్ట్ విశ్లేషిస్తోంది..."},
    "analysisFailed": {
        "en": "Failed to analyze report",
        "hi": "रिपोर्ट का विश्लेषण विफल रहा",
        "te": "రిపోర్ట్ విశ్లేషణ విఫలమైంది",
    },
    "notALabReport": {
        "en": "This file does not look like a lab report",
        "hi": "यह फ़ाइल लैब रिपोर्ट जैसी नहीं लगती",
        "te": "ఈ ఫైల్ ల్యాబ్ రిపోర్ట్ లాగా లేదు",
    },
    "pdfOnly": {"en": "Please upload a PDF file", "hi": "कृपया PDF फ़ाइल अपलोड करें", "te": "దయచేసి PDF ఫైల్ అప్‌లోడ్ చేయండి"},
    "fileTooLarge": {
        "en": "File too large (max 20MB)",
        "hi": "फ़ाइल बहुत बड़ी है (अधिकतम 20MB)",
        "te": "ఫైల్ చాలా పెద్దది (గరిష్టం 20MB)",
    },

    # ── Health cards ─────────────────────────────────────────────────────
    "recentHealth": {"en": "Recent Health Status", "hi": "हालिया स्वास्थ्य स्थिति", "te": "ఇటీవల ఆరోగ్య స్థితి"},
    "lastUpdated": {"en": "Last updated", "hi": "अंतिम अपडेट", "te": "చివరిగా నవీకరించబడింది"},
    "noData": {"en": "No data yet", "hi": "अभी कोई डेटा नहीं", "te": "ఇంకా డేటా లేదు"},
    "bloodSugarBP": {"en": "Blood Sugar & BP", "hi": "रक्त शर्करा और बीपी", "te": "రక్తంలో చక్కెర & బీపీ"},
    "cholesterolHeart": {"en": "Cholesterol & Heart", "hi": "कोलेस्ट्रॉल और हृदय", "te": "కొలెస్ట్రాల్ & గుండె"},
    "cbcHemoglobin": {"en": "CBC & Hemoglobin", "hi": "सीबीसी और हीमोग्लोबिन", "te": "సీబీసీ & హీమోగ్లోబిన్"},
    "fastingGlucose": {"en": "Fasting Glucose", "hi": "उपवास ग्लूकोज", "te": "ఉపవాస గ్లూకోజ్"},
    "postMealGlucose": {"en": "Post-Meal Glucose", "hi": "भोजन के बाद ग्लूकोज", "te": "భోజనం తర్వాత గ్లూకోజ్"},
    "systolicBP": {"en": "Systolic BP", "hi": "सिस्टोलिक बीपी", "te": "సిస్టోలిక్ బీపీ"},
    "diastolicBP": {"en": "Diastolic BP", "hi": "डायस्टोलिक बीपी", "te": "డయాస్టోలిక్ బీపీ"},
    "totalCholesterol": {"en": "Total Cholesterol", "hi": "कुल कोलेस्ट्रॉल", "te": "మొత్తం కొలెస్ట్రాల్"},
    "hdl": {"en": "HDL", "hi": "एचडीएल", "te": "హెచ్‌డిఎల్"},
    "ldl": {"en": "LDL", "hi": "एलडीएल", "te": "ఎల్‌డిఎల్"},
    "heartRate": {"en": "Heart Rate", "hi": "हृदय गति", "te": "గుండె వేగం"},
    "hemoglobin": {"en": "Hemoglobin", "hi": "हीमोग्लोबिन", "te": "హీమోగ్లోబిన్"},
    "wbc": {"en": "WBC", "hi": "डब्ल्यूबीसी", "te": "డబ్ల్యూబీసీ"},
    "rbc": {"en": "RBC", "hi": "आरबीसी", "te": "ఆర్‌బీసీ"},
    "plateletCount": {"en": "Platelet Count", "hi": "प्लेटलेट गिनती", "te": "ప్లేట్‌లెట్ కౌంట్"},

    # ── Statuses ─────────────────────────────────────────────────────────
    "normal": {"en": "Normal", "hi": "सामान्य", "te": "సాధారణం"},
    "warning": {"en": "Warning", "hi": "चेतावनी", "te": "హెచ్చరిక"},
    "critical": {"en": "Critical", "hi": "गंभीर", "te": "క్రిటికల్"},
    "low": {"en": "Low", "hi": "कम", "te": "తక్కువ"},
    "high": {"en": "High", "hi": "अधिक", "te": "అధికం"},
    "low_risk": {"en": "Low", "hi": "निम्न", "te": "తక్కువ"},
    "moderate_risk": {"en": "Moderate", "hi": "मध्यम", "te": "మధ్యస్థం"},
    "high_risk": {"en": "High", "hi": "उच्च", "te": "అధికం"},

    # ── Units ────────────────────────────────────────────────────────────
    "unit_mgdl": {"en": "mg/dL", "hi": "मि.ग्रा./डी.ली."},
    "unit_mmhg": {"en": "mmHg", "hi": "मि.मी.एचजी"},
    "unit_bpm": {"en": "bpm", "hi": "बीपीएम"},
    "unit_gdl": {"en": "g/dL", "hi": "ग्रा./डी.ली."},
    "unit_cellsul": {"en": "cells/µL", "hi": "कोशिकाएं/µL"},
    "unit_millionul": {"en": "M/µL"},
    "unit_perul": {"en": "/µL"},

    # ── Chat agent ───────────────────────────────────────────────────────
    "agent_welcome": {
        "en": (
            "Hi! 👋 I'm **Lena**, your personal health assistant. I can help you "
            "**book doctor appointments**, **book lab tests (like MRI or X-Ray)**, find "
            "**nearby hospitals**, or answer questions about your health reports!"
        ),
        "hi": (
            "नमस्ते! 👋 मैं **Lena** हूँ, आपकी व्यक्तिगत स्वास्थ्य सहायक। मैं **डॉक्टर अपॉइंटमेंट बुक** "
            "करने, **लैब टेस्ट (जैसे MRI या X-Ray) बुक** करने, **पास के अस्पताल** खोजने या आपकी "
            "स्वास्थ्य रिपोर्ट के बारे में सवालों का जवाब देने में मदद कर सकती हूँ!"
        ),
        "te": (
            "హాయ్! 👋 నేను **Lena**, మీ వ్యక్తిగత ఆరోగ్య సహాయకురాలిని. నేను **డాక్టర్ అపాయింట్‌మెంట్ "
            "బుక్** చేయడంలో, **ల్యాబ్ టెస్ట్‌లను (MRI లేదా X-Ray వంటివి) బుక్** చేయడంలో, **దగ్గర్లో "
            "ఆసుపత్రులు** కనుగొనడంలో లేదా మీ ఆరోగ్య నివేదికల గురించి ప్రశ్నలకు సమాధానం ఇవ్వగలను!"
        ),
    },
    "agent_placeholder": {
        "en": "Ask Lena anything...",
        "hi": "Lena से कुछ भी पूछें...",
        "te": "Lena ని ఏదైనా అడగండి...",
    },
    "card_booking_intro": {
        "en": "Sure! Let me help you book an appointment 🗓️",
        "hi": "ज़रूर! आइए आपकी अपॉइंटमेंट बुक करें 🗓️",
        "te": "తప్పకుండా! మీ అపాయింట్‌మెంట్ బుక్ చేద్దాం 🗓️",
    },
    "card_lab_booking_intro": {
        "en": "Okay, let's get your lab test booked! 🧪",
        "hi": "ठीक है, आइए आपका लैब टेस्ट बुक करें! 🧪",
        "te": "సరే, మీ ల్యాబ్ టెస్ట్ బుక్ చేద్దాం! 🧪",
    },
    "card_hospitals_intro": {
        "en": "Here are some hospitals near you 🏥",
        "hi": "आपके पास के कुछ अस्पताल ये हैं 🏥",
        "te": "మీకు దగ్గర్లో ఉన్న కొన్ని ఆసుపత్రులు ఇవి 🏥",
    },
    "card_hospitals_followup": {
        "en": "Here are some specialized hospitals near you 🏥",
        "hi": "आपके पास के कुछ विशेष अस्पताल ये हैं 🏥",
        "te": "మీకు దగ్గర్లో ఉన్న కొన్ని ప్రత్యేక ఆసుపత్రులు ఇవి 🏥",
    },
    "booking_confirmed": {
        "en": "Appointment confirmed with {doctor}!",
        "hi": "{doctor} के साथ अपॉइंटमेंट की पुष्टि हो गई!",
        "te": "{doctor} తో అపాయింట్‌మెంట్ నిర్ధారించబడింది!",
    },
    "lab_booking_confirmed": {
        "en": "{scan_type} booked for {patient_name}!",
        "hi": "{patient_name} के लिए {scan_type} बुक हो गया!",
        "te": "{patient_name} కోసం {scan_type} బుక్ అయింది!",
    },
    "booking_followup": {
        "en": (
            "✅ Your appointment with **{doctor}** ({specialty}) is booked for **{date}** at "
            "**{time}**. You'll receive a confirmation SMS shortly! Is there anything else "
            "I can help you with?"
        ),
        "hi": (
            "✅ **{doctor}** ({specialty}) के साथ आपकी अपॉइंटमेंट **{date}** को **{time}** बजे बुक "
            "हो गई है। आपको जल्द ही पुष्टि SMS मिलेगा! क्या मैं और कुछ मदद कर सकती हूँ?"
        ),
        "te": (
            "✅ **{doctor}** ({specialty}) తో మీ అపాయింట్‌మెంట్ **{date}** న **{time}** కు బుక్ "
            "అయింది. త్వరలో మీకు నిర్ధారణ SMS వస్తుంది! నేను ఇంకేమైనా సహాయం చేయగలనా?"
        ),
    },
    "lab_booking_followup": {
        "en": (
            "✅ Your **{scan_type}** for **{patient_name}** is booked on **{date}** at "
            "**{time}**. Fasting may be required depending on the test! Is there anything "
            "else I can help you with?"
        ),
        "hi": (
            "✅ **{patient_name}** के लिए आपका **{scan_type}** **{date}** को **{time}** बजे बुक "
            "हो गया है। टेस्ट के अनुसार उपवास की आवश्यकता हो सकती है! क्या मैं और कुछ मदद कर सकती हूँ?"
        ),
        "te": (
            "✅ **{patient_name}** కోసం మీ **{scan_type}** **{date}** న **{time}** కు బుక్ "
            "అయింది. పరీక్షను బట్టి ఉపవాసం అవసరం కావచ్చు! నేను ఇంకేమైనా సహాయం చేయగలనా?"
        ),
    },
}


def is_supported(language: str) -> bool:
    """Return True if *language* is one of the supported display languages."""
    return language in LANGUAGES


def require_language(language: str) -> str:
    """Return *language* unchanged, or raise UnsupportedLanguageError."""
    if not is_supported(language):
        raise UnsupportedLanguageError(
            f"Unsupported language '{language}'. Choose one of: {', '.join(LANGUAGES)}"
        )
    return language


def lookup(language: str, key: str) -> str:
    """Look up *key* for *language*, falling back to English.

    Unknown keys are returned as-is so a missing string never blocks
    rendering.
    """
    entry = TRANSLATIONS.get(key)
    if entry is None:
        logger.warning("Missing translation key: %s", key)
        return key
    return entry.get(language) or entry[DEFAULT_LANGUAGE]


def table(language: str) -> dict[str, str]:
    """Return the full key -> string table for *language* (with fallback)."""
    return {key: lookup(language, key) for key in TRANSLATIONS}
