"""Style table mapping citation style tokens to export commands."""

import re
from typing import Optional

from citeshift.config import DEFAULT_COMMAND, DEFAULT_STYLES, EditorConfig
from citeshift.exceptions import InvalidStyleError
from citeshift.models.schemas import StyleChoice


# A token sits between "cite/" and ":" and may carry variants: "t/bf"
STYLE_TOKEN_PATTERN = re.compile(r'^[^:;@\[\]\s/][^:;@\[\]\s]*$')


class StyleTable:
    """Resolve style tokens to commands, falling back to a default command."""

    def __init__(
        self,
        styles: Optional[dict[str, str]] = None,
        default_command: str = DEFAULT_COMMAND,
    ):
        self.styles = dict(DEFAULT_STYLES if styles is None else styles)
        self.default_command = default_command

    @classmethod
    def from_config(cls, config: EditorConfig) -> "StyleTable":
        return cls(config.styles, config.default_command)

    def resolve_command(self, token: Optional[str]) -> str:
        """
        Look up the export command for a style token.

        Absent and unregistered tokens both resolve to the default command,
        so every token has a command.
        """
        if not token:
            return self.default_command
        return self.styles.get(token, self.default_command)

    def choices(self, current: Optional[str] = None) -> list[StyleChoice]:
        """All selectable styles, the default style first."""
        current = current or None
        choices = [StyleChoice(token=None, command=self.default_command, current=current is None)]
        for token, command in self.styles.items():
            choices.append(StyleChoice(token=token, command=command, current=token == current))
        return choices

    def __contains__(self, token: object) -> bool:
        return token in self.styles


def style_marker(token: Optional[str]) -> str:
    """Text that follows "cite" in a serialized citation."""
    if not token:
        return ""
    return f"/{token}"


def normalize_style_token(token: Optional[str]) -> Optional[str]:
    """
    Validate a style token before it is written into a citation.

    Returns None for the absent marker (None or blank).
    """
    if token is None:
        return None
    token = token.strip()
    if token.startswith("/"):
        token = token[1:]
    if not token:
        return None
    if not STYLE_TOKEN_PATTERN.match(token):
        raise InvalidStyleError(f"invalid style token: {token!r}")
    return token
