"""
Rule-based supportive notes.

A note is four fragments in a fixed order: an emotion opener, an optional
stress remark, an optional happiness remark and a closer that depends on how
long the entry is. No randomness and no model call, so the same inputs always
give the same note.
"""

DETAILED_ENTRY_WORDS = 100
HIGH_SCORE_THRESHOLD = 7
LOW_SCORE_THRESHOLD = 4

EMOTION_OPENERS = {
    "joy": "Your entry reflects positive emotions. It's wonderful to see you experiencing joy. ",
    "sadness": "I notice you're experiencing some difficult emotions. Remember that it's okay to feel this way. ",
    "anger": "Your frustration is valid. Consider what's at the root of these feelings. ",
    "fear": "I can sense some anxiety in your words. Let's explore what feels overwhelming. ",
}
GENERIC_OPENER = "Thank you for sharing your thoughts today. "

HIGH_STRESS_REMARK = "Your stress levels seem elevated. Consider taking breaks and practicing relaxation techniques. "
LOW_STRESS_REMARK = "You seem to be managing stress well. Keep up these positive patterns. "

HIGH_HAPPINESS_REMARK = "Your positive outlook is encouraging. Try to identify what's contributing to these good feelings. "
LOW_HAPPINESS_REMARK = "I notice your happiness levels are lower. Consider activities or people that typically lift your spirits. "

DETAILED_CLOSER = "Your detailed reflection shows good self-awareness. Continue this practice of thorough self-expression."
SHORT_CLOSER = "Consider expanding on your feelings in future entries for deeper insights."


def word_count(text: str) -> int:
    return len(text.split())


def _level_remark(score: int, high: str, low: str) -> str:
    if score > HIGH_SCORE_THRESHOLD:
        return high
    if score < LOW_SCORE_THRESHOLD:
        return low
    return ""


def generate_therapy_note(emotion: str, stress: int, happiness: int, entry_text: str) -> str:
    """
    Build the supportive note for one analysed entry.

    Args:
        emotion: Dominant emotion label (exact match against the openers)
        stress: Stress score
        happiness: Happiness score
        entry_text: The journal text, used only for its word count

    Returns:
        The concatenated note
    """
    opener = EMOTION_OPENERS.get(emotion, GENERIC_OPENER)
    stress_remark = _level_remark(stress, HIGH_STRESS_REMARK, LOW_STRESS_REMARK)
    happiness_remark = _level_remark(happiness, HIGH_HAPPINESS_REMARK, LOW_HAPPINESS_REMARK)
    closer = DETAILED_CLOSER if word_count(entry_text) > DETAILED_ENTRY_WORDS else SHORT_CLOSER

    return opener + stress_remark + happiness_remark + closer
