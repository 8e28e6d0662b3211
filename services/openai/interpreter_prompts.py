"""Prompt builders for natural-language browser instruction interpretation."""

def build_system_prompt() -> str:
    """Return the system prompt for the interpreter."""
    return (
        "You are a browser automation planner. "
        "Translate one natural-language instruction into exactly one browser action. "
        "Prefer the most literal reading of the instruction and never invent URLs that are not implied by it."
    )


def build_user_prompt(instruction: str, current_url: str | None = None) -> str:
    """Return the user prompt wrapping the instruction and the page it applies to."""
    location = f" The browser is currently on {current_url}." if current_url else ""
    return (
        f"Instruction: {instruction.strip()}\n"
        f"Choose the single best action, a CSS selector or URL as its target, and any text value it needs.{location}"
    )
