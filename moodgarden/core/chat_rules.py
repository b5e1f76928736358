"""Rule-based Chat Replies - offline fallback for the support assistant.

An ordered list of (predicate, response) pairs over the lowercased user
text. The first matching rule wins.
"""

from typing import Callable

CRISIS_LINK = "https://www2.hse.ie/mental-health/"

GREETING = (
    "Hello! I'm here to provide general mental health support and information. "
    "How can I help you today? 🌱\n\n"
    "Please note: I provide general guidance only. For professional support, please "
    "consult with a healthcare provider or visit HSE Mental Health Services."
)


def _mentions(*keywords: str) -> Callable[[str], bool]:
    return lambda text: any(k in text for k in keywords)


ANXIETY_REPLY = (
    "I understand that anxiety can be challenging. Here are some general tips:\n\n"
    "• Try deep breathing exercises (4-4-4 technique)\n"
    "• Practice mindfulness or meditation\n"
    "• Take regular breaks and get some fresh air\n"
    "• Consider talking to someone you trust\n\n"
    f"For professional support, visit: {CRISIS_LINK}\n\n"
    "Remember, I provide general guidance only. If you're experiencing severe anxiety, "
    "please consult a healthcare professional."
)

SADNESS_REPLY = (
    "I'm sorry you're feeling this way. Here are some general suggestions:\n\n"
    "• Try to maintain a routine\n"
    "• Get some natural light and gentle exercise\n"
    "• Stay connected with supportive people\n"
    "• Consider journaling your thoughts\n"
    "• Practice self-compassion\n\n"
    f"For professional support, visit: {CRISIS_LINK}\n\n"
    "If you're having thoughts of self-harm, please contact emergency services immediately."
)

STRESS_REPLY = (
    "Stress can be overwhelming. Here are some general strategies:\n\n"
    "• Break tasks into smaller steps\n"
    "• Practice time management\n"
    "• Try relaxation techniques\n"
    "• Ensure you're getting enough sleep\n"
    "• Consider what you can control vs. what you can't\n\n"
    f"For more resources, visit: {CRISIS_LINK}\n\n"
    "Remember, I provide general guidance only."
)

SLEEP_REPLY = (
    "Sleep is important for mental health. General tips:\n\n"
    "• Maintain a regular sleep schedule\n"
    "• Create a calming bedtime routine\n"
    "• Limit screens before bed\n"
    "• Avoid caffeine in the afternoon\n"
    "• Keep your bedroom cool and dark\n\n"
    f"For persistent sleep issues, consider consulting a healthcare provider: {CRISIS_LINK}"
)

HELP_REPLY = (
    "I'm here to listen and provide general guidance. Here are some resources:\n\n"
    f"• HSE Mental Health Services: {CRISIS_LINK}\n"
    "• HSE Live: 1800 700 700 (Mon-Fri 8am-8pm)\n"
    "• In an emergency, call 999 or 112\n\n"
    "Remember, I provide general information only. For professional mental health "
    "support, please consult with a healthcare provider."
)

GENERIC_REPLY = (
    "Thank you for sharing. I understand this is important to you. Here are some "
    "general mental health tips:\n\n"
    "• Practice self-care regularly\n"
    "• Stay connected with supportive people\n"
    "• Maintain a routine when possible\n"
    "• Consider mindfulness or relaxation techniques\n"
    "• Track your mood and patterns (like you're doing in MoodGarden!)\n\n"
    f"For professional support and resources, visit: {CRISIS_LINK}\n\n"
    "Remember, I provide general guidance only. If you need immediate help, please "
    "contact emergency services or a healthcare professional."
)

RULES: list[tuple[Callable[[str], bool], str]] = [
    (_mentions("anxious", "anxiety", "worried"), ANXIETY_REPLY),
    (_mentions("sad", "depressed", "down"), SADNESS_REPLY),
    (_mentions("stress"), STRESS_REPLY),
    (_mentions("sleep", "tired", "insomnia"), SLEEP_REPLY),
    (_mentions("help", "support"), HELP_REPLY),
]


def fallback_reply(user_text: str) -> str:
    """Pick a canned supportive reply for the user's message.

    Args:
        user_text: The message as typed

    Returns:
        Reply of the first matching topic, or the generic reply
    """
    text = user_text.lower()
    for matches, reply in RULES:
        if matches(text):
            return reply
    return GENERIC_REPLY
