"""
Chat Agent Prompts

System prompt for the Lena health assistant, suggested prompts per
language, and the canned answers used by the local rule-based responder.
"""

from labassist.models.schemas import LabReport


# ---------------------------------------------------------------------------
# System-level prompt; the report block is filled per session
# ---------------------------------------------------------------------------
AGENT_SYSTEM_PROMPT = """You are Lena, a warm, friendly, and highly knowledgeable \
personal health assistant for the "Health Hub Helper" app.

User's lab report ({patient_name}, {date}):
{report_lines}
- Health Score: {health_score}/100, Risk Level: {risk_level}

Your capabilities:
1. Answer health questions about lab reports
2. Help users book doctor appointments (use the booking UI)
3. Help users book lab tests like MRI, X-Ray, CT Scans, Ultrasound, Blood tests (use the lab booking UI)
4. Suggest nearby hospitals (use the hospital cards)

Guidelines:
- Your name is Lena. Always introduce yourself as Lena.
- Be warm, calm, and conversational.
- Messages start with a [Language: xx] tag giving the user's display language.
- ALWAYS reply in the SAME LANGUAGE as the user's message. If they write in Hindi, \
reply in Hindi. If Telugu, reply in Telugu. If English, reply in English.
- Keep responses concise and friendly, with occasional emojis.
- When user asks to book appointment or see doctor, respond with: SHOW_BOOKING_CARD
- When user asks to book a lab test, MRI, X-Ray, CT scan, ultrasound, or blood test, \
respond with: SHOW_LAB_BOOKING_CARD
- When user asks for nearby hospitals or clinics, respond with: SHOW_HOSPITAL_CARD"""


def format_system_prompt(report: LabReport) -> str:
    """Embed *report* into the assistant's system prompt."""
    lines = []
    for test in report.tests:
        status = test.status.capitalize()
        if test.status != "normal":
            status += f"; normal {test.normal_range.min:g}–{test.normal_range.max:g}"
        lines.append(f"- {test.name}: {test.value:g} {test.unit} ({status})")
    return AGENT_SYSTEM_PROMPT.format(
        patient_name=report.patient_name,
        date=report.date,
        report_lines="\n".join(lines),
        health_score=report.health_score,
        risk_level=report.risk_level,
    )


def format_user_turn(language: str, text: str) -> str:
    """Tag a user message with the active display language."""
    return f"[Language: {language}] {text}"


SUGGESTED: dict[str, list[str]] = {
    "en": ["Book a doctor appointment", "Book a lab test (MRI/X-Ray)", "Find nearby hospitals"],
    "hi": ["डॉक्टर अपॉइंटमेंट बुक करें", "लैब टेस्ट (MRI/X-Ray) बुक करें", "पास के अस्पताल खोजें"],
    "te": ["డాక్టర్ అపాయింట్‌మెంట్ బుక్ చేయండి", "ల్యాబ్ టెస్ట్ (MRI/X-Ray) బుక్ చేయండి", "దగ్గర్లో ఆసుపత్రులు కనుగొనండి"],
}


# ---------------------------------------------------------------------------
# Canned local answers (used when the remote model is unavailable)
# ---------------------------------------------------------------------------
LOCAL_RESPONSES: dict[str, dict[str, str]] = {
    "greet": {
        "en": "Hi there! 👋 I'm Lena, your health assistant. How can I help you today?",
        "hi": "नमस्ते! 👋 मैं Lena हूँ। आज मैं आपकी कैसे मदद कर सकती हूँ?",
        "te": "హాయ్! 👋 నేను Lena. నేను మీకు ఎలా సహాయం చేయగలను?",
    },
    "hemoglobin": {
        "en": (
            "Your hemoglobin is 11.8 g/dL, which is slightly below normal (12.0–17.5 g/dL) 🔴. "
            "This may suggest anemia or iron deficiency. \n\n🥦 **Recommended Foods:** Eat more "
            "spinach, beetroot, lentils, red meat, and citrus fruits (Vitamin C) to boost iron "
            "absorption. \n\n⚠️ **Action:** Since it is below normal, I strongly recommend "
            "consulting a doctor. SHOW_HOSPITAL_CARD"
        ),
        "hi": (
            "आपका हीमोग्लोबिन 11.8 g/dL है, जो सामान्य से कम है 🔴। \n\n🥦 **सुझाए गए खाद्य पदार्थ:** "
            "पालक, चुकंदर, दाल और विटामिन सी युक्त फल खाएं। \n\n⚠️ **कार्रवाई:** चूँकि यह सामान्य से "
            "नीचे है, मैं डॉक्टर से परामर्श करने की सलाह देती हूँ। SHOW_HOSPITAL_CARD"
        ),
        "te": (
            "మీ హిమోగ్లోబిన్ 11.8 g/dL, సాధారణ పరిధి కంటే తక్కువగా ఉంది 🔴. \n\n🥦 **సూచించబడిన "
            "ఆహారం:** పాలకూర, బీట్‌రూట్, పప్పులు మరియు సిట్రస్ పండ్లు తినండి. \n\n⚠️ **చర్య:** ఇది "
            "సాధారణం కంటే తక్కువగా ఉన్నందున, డాక్టర్‌ను సంప్రదించాలి. SHOW_HOSPITAL_CARD"
        ),
    },
    "cholesterol": {
        "en": (
            "Your total cholesterol is 215 mg/dL (slightly high) 🟡. \n\n🥦 **Recommended Foods:** "
            "Reduce saturated fats and eat more Omega-3 rich foods (salmon, chia seeds), oats, "
            "beans, and foods rich in Vitamin B3 (Niacin). \n\n⚠️ **Action:** Since it is "
            "elevated, I recommend consulting a doctor to discuss lifestyle changes. "
            "SHOW_HOSPITAL_CARD"
        ),
        "hi": (
            "आपका कोलेस्ट्रॉल 215 mg/dL (थोड़ा अधिक) है 🟡। \n\n🥦 **सुझाए गए खाद्य पदार्थ:** संतृप्त "
            "वसा कम करें और ओमेगा-3 (चिया बीज), ओट्स और विटामिन बी3 युक्त भोजन खाएं। \n\n⚠️ "
            "**कार्रवाई:** चूँकि यह बढ़ा हुआ है, आहार में बदलाव के लिए डॉक्टर से बात करें। "
            "SHOW_HOSPITAL_CARD"
        ),
        "te": (
            "మీ కొలెస్ట్రాల్ 215 mg/dL (కొంచెం అధికం) 🟡. \n\n🥦 **సూచించబడిన ఆహారం:** ఒమేగా-3 "
            "(చియా విత్తనాలు), ఓట్స్ మరియు విటమిన్ బి3 ఉన్న ఆహారం తీసుకోండి. \n\n⚠️ **చర్య:** ఇది "
            "కొంచెం ఎక్కువగా ఉన్నందున, డాక్టర్‌ను సంప్రదించండి. SHOW_HOSPITAL_CARD"
        ),
    },
    "sugar": {
        "en": (
            "Your fasting glucose is 95 mg/dL, which is normal 🟢. However, if your sugar levels "
            "ever drop too low (hypoglycemia) 🔴, you should consume fast-acting carbs like fruit "
            "juice or honey. \n\n🥦 **Recommended Foods (for steady levels):** Whole grains, nuts, "
            "seeds, and leafy greens. \n\n⚠️ **Action:** If you feel dizzy or your lab shows very "
            "low/high sugar, please consult a doctor immediately. SHOW_HOSPITAL_CARD"
        ),
        "hi": (
            "आपका फास्टिंग ग्लूकोज 95 mg/dL है, जो सामान्य है 🟢। लेकिन अगर शुगर कम हो जाए, तो तुरंत "
            "फलों का रस या शहद लें। \n\n🥦 **सुझाए गए खाद्य पदार्थ:** साबुत अनाज, मेवे और हरी सब्जियां। "
            "\n\n⚠️ **कार्रवाई:** यदि आपको चक्कर आता है या शुगर बहुत कम/ज्यादा है, तो तुरंत डॉक्टर से "
            "सलाह लें। SHOW_HOSPITAL_CARD"
        ),
        "te": (
            "మీ ఫాస్టింగ్ గ్లూకోజ్ 95 mg/dL, ఇది సాధారణం 🟢. దయచేసి పంచదార స్థాయి తగ్గినట్లయితే వెంటనే "
            "పండ్ల రసం లేదా తేనె తీసుకోండి. \n\n🥦 **సూచించబడిన ఆహారం:** తృణధాన్యాలు, గింజలు మరియు "
            "ఆకుకూరలు. \n\n⚠️ **చర్య:** మీకు కళ్లు తిరిగినట్లు అనిపిస్తే, వెంటనే డాక్టర్‌ను సంప్రదించండి. "
            "SHOW_HOSPITAL_CARD"
        ),
    },
    "diet": {
        "en": (
            "Based on your general profile 🥗:\n• Leafy greens & lentils for Iron\n• Citrus fruits "
            "for Vitamin C\n• Nuts, seeds, & fatty fish for Omega-3s\n• Whole grains for stable "
            "sugar\n\nIf any levels are abnormal, always consult a doctor!"
        ),
        "hi": (
            "आपके प्रोफ़ाइल के आधार पर 🥗:\n• आयरन के लिए हरी सब्जियां और दाल\n• विटामिन सी के लिए "
            "खट्टे फल\n• ओमेगा-3 के लिए मेवे और मछली\n\nयदि कोई भी स्तर सामान्य नहीं है, तो डॉक्टर से मिलें!"
        ),
        "te": (
            "మీ ప్రొఫైల్ ఆధారంగా 🥗:\n• ఇనుము కోసం ఆకుకూరలు మరియు పప్పులు\n• విటమిన్ సి కోసం సిట్రస్ "
            "పండ్లు\n• ఒమేగా-3 కోసం గింజలు మరియు చేపలు\n\nఏదైనా స్థాయి అసాధారణంగా ఉంటే, డాక్టర్‌ను కలవండి!"
        ),
    },
    "default": {
        "en": (
            "Great question! 😊 I'm Lena and I'm here to help with your health queries, book "
            "appointments, or find nearby hospitals. What would you like?"
        ),
        "hi": (
            "अच्छा सवाल! 😊 मैं Lena हूँ। मैं स्वास्थ्य प्रश्नों, अपॉइंटमेंट बुकिंग या अस्पताल खोजने में "
            "मदद कर सकती हूँ।"
        ),
        "te": (
            "మంచి ప్రశ్న! 😊 నేను Lena. ఆరోగ్య సందేహాలు, అపాయింట్‌మెంట్ బుకింగ్ లేదా ఆసుపత్రి కోసం "
            "మీకు సహాయం చేయగలను."
        ),
    },
}


# ---------------------------------------------------------------------------
# Report-grounded local answers (sessions about supplied metrics)
# ---------------------------------------------------------------------------

# topic -> metric keys it can answer from, in preference order
TOPIC_METRICS: dict[str, tuple[str, ...]] = {
    "hemoglobin": ("hemoglobin",),
    "cholesterol": ("totalCholesterol", "ldl", "hdl"),
    "sugar": ("fastingGlucose", "postMealGlucose"),
}

METRIC_READING: dict[str, str] = {
    "en": "Your {name} is {value} {unit}, which is {status} (normal {low}–{high} {unit}) {icon}.",
    "hi": "आपका {name} {value} {unit} है, जो {status} है (सामान्य {low}–{high} {unit}) {icon}।",
    "te": "మీ {name} {value} {unit}, ఇది {status} (సాధారణ పరిధి {low}–{high} {unit}) {icon}.",
}

METRIC_STATUS_WORDS: dict[str, dict[str, str]] = {
    "en": {"normal": "within the normal range", "low": "below normal", "high": "above normal"},
    "hi": {"normal": "सामान्य सीमा में", "low": "सामान्य से कम", "high": "सामान्य से अधिक"},
    "te": {
        "normal": "సాధారణ పరిధిలో ఉంది",
        "low": "సాధారణం కంటే తక్కువగా ఉంది",
        "high": "సాధారణం కంటే ఎక్కువగా ఉంది",
    },
}

TOPIC_FOODS: dict[str, dict[str, str]] = {
    "hemoglobin": {
        "en": "🥦 **Recommended Foods:** Spinach, beetroot, lentils, red meat, and citrus fruits "
              "(Vitamin C) to boost iron absorption.",
        "hi": "🥦 **सुझाए गए खाद्य पदार्थ:** पालक, चुकंदर, दाल और विटामिन सी युक्त फल।",
        "te": "🥦 **సూచించబడిన ఆహారం:** పాలకూర, బీట్‌రూట్, పప్పులు మరియు సిట్రస్ పండ్లు.",
    },
    "cholesterol": {
        "en": "🥦 **Recommended Foods:** Omega-3 rich foods (salmon, chia seeds), oats and beans; "
              "keep saturated fats low.",
        "hi": "🥦 **सुझाए गए खाद्य पदार्थ:** ओमेगा-3 (चिया बीज), ओट्स और दालें; संतृप्त वसा कम रखें।",
        "te": "🥦 **సూచించబడిన ఆహారం:** ఒమేగా-3 (చియా విత్తనాలు), ఓట్స్ మరియు బీన్స్.",
    },
    "sugar": {
        "en": "🥦 **Recommended Foods (for steady levels):** Whole grains, nuts, seeds, and leafy greens.",
        "hi": "🥦 **सुझाए गए खाद्य पदार्थ:** साबुत अनाज, मेवे और हरी सब्जियां।",
        "te": "🥦 **సూచించబడిన ఆహారం:** తృణధాన్యాలు, గింజలు మరియు ఆకుకూరలు.",
    },
}

METRIC_ACTIONS: dict[str, dict[str, str]] = {
    "abnormal": {
        "en": "⚠️ **Action:** Since it is outside the normal range, I recommend consulting a "
              "doctor. SHOW_HOSPITAL_CARD",
        "hi": "⚠️ **कार्रवाई:** चूँकि यह सामान्य सीमा से बाहर है, डॉक्टर से परामर्श करें। SHOW_HOSPITAL_CARD",
        "te": "⚠️ **చర్య:** ఇది సాధారణ పరిధికి బయట ఉన్నందున, డాక్టర్‌ను సంప్రదించండి. SHOW_HOSPITAL_CARD",
    },
    "normal": {
        "en": "✅ Keep up your current habits and recheck it at your next routine test.",
        "hi": "✅ अपनी मौजूदा आदतें बनाए रखें और अगली नियमित जाँच में इसे फिर देखें।",
        "te": "✅ మీ ప్రస్తుత అలవాట్లను కొనసాగించండి, తదుపరి పరీక్షలో మళ్లీ చూడండి.",
    },
}
