from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Prompt:
    name: str
    template: str


# Built-in texts; a persona document overrides the persona and greeting.
PROMPTS: Dict[str, Prompt] = {
    "default_persona": Prompt(
        name="default_persona",
        template=(
            "You are a friendly and thoughtful AI assistant. "
            "Remember the context of the conversation and be helpful."
        ),
    ),
    "acknowledgment": Prompt(
        name="acknowledgment",
        template="Understood! I'm ready to help and will keep the context of our conversation in mind.",
    ),
    "system_seed": Prompt(
        name="system_seed",
        template="System instructions are loaded from the persona document.",
    ),
    "image_analysis": Prompt(
        name="image_analysis",
        template="Describe what you see in this image. Be detailed and helpful.",
    ),
    "greeting": Prompt(
        name="greeting",
        template="Hi, I'm glad you're here. How are you feeling today?",
    ),
    "reset": Prompt(
        name="reset",
        template="Alright, let's start with a clean slate. How are you feeling right now?",
    ),
    "persona_changed": Prompt(
        name="persona_changed",
        template="Communication style changed to: {persona}",
    ),
    "voice_unsupported": Prompt(
        name="voice_unsupported",
        template="Voice message received! Unfortunately speech recognition is not set up yet.",
    ),
    "help": Prompt(
        name="help",
        template=(
            "Support and help\n\n"
            "Commands:\n"
            "/start - begin\n"
            "/help - show this help\n"
            "/reset - start over\n"
            "/persona <style> - change the communication style\n"
            "/memory - show what I remember about you\n"
            "/stats - bot statistics\n\n"
            "Just write to me about how you feel, your worries, cravings, sleep or anything that is hard.\n\n"
            "I am not a substitute for a doctor, but I am always here to support you."
        ),
    ),
    "button_support": Prompt(
        name="button_support",
        template="I'm here to support you. Tell me, how are things? What's on your mind?",
    ),
    "button_sobriety": Prompt(
        name="button_sobriety",
        template="Every sober day is a victory. How is your sobriety going? Any cravings?",
    ),
    "button_stats": Prompt(
        name="button_stats",
        template="Your statistics: {total_messages} support messages. Every conversation is a step towards recovery.",
    ),
    "button_reset": Prompt(
        name="button_reset",
        template="Starting over.",
    ),
    "button_like": Prompt(
        name="button_like",
        template="Glad I could help!",
    ),
    "button_dislike": Prompt(
        name="button_dislike",
        template="Got it, let's try a different way.",
    ),
    "apology": Prompt(
        name="apology",
        template="Sorry, something went wrong. Please try again.",
    ),
}


def get_prompt(name: str) -> str:
    if name not in PROMPTS:
        raise KeyError(f"Unknown prompt: {name}")
    return PROMPTS[name].template
