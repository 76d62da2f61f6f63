"""Message model — levels, components, authors, formatted detail."""

from herald.message.author import make_author
from herald.message.component import Component
from herald.message.detail import (
    DetailBlock,
    DetailBuilder,
    FormattedDetail,
    Style,
    StyledText,
)
from herald.message.level import Level
from herald.message.message import Message, now_millis

__all__ = [
    "Component",
    "DetailBlock",
    "DetailBuilder",
    "FormattedDetail",
    "Level",
    "Message",
    "Style",
    "StyledText",
    "make_author",
    "now_millis",
]
