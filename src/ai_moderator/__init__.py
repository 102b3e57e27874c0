"""AI Moderator.

Moderates GitHub issues and comments from workflow events:
- extracts the text of newly opened issues and new comments
- evaluates it against a directory of `.prompt.yml` classification prompts
- labels spam / AI-generated content and hides offending comments
"""

__version__ = "0.1.0"

from ai_moderator.config import ModeratorSettings

__all__ = ["__version__", "ModeratorSettings"]
