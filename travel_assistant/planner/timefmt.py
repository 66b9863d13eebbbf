import math


def format_minutes(minutes: float) -> str:
    """Render minutes as e.g. ``"2 hours and 5 minutes"`` or ``"45 minutes"``."""
    total = int(math.floor(minutes + 0.5))  # half rounds up
    if total < 60:
        return f"{total} minute{'' if total == 1 else 's'}"

    hours, rest = divmod(total, 60)
    hours_text = f"{hours} hour{'' if hours == 1 else 's'}"
    if rest == 0:
        return hours_text
    return f"{hours_text} and {rest} minute{'' if rest == 1 else 's'}"
