"""Mode page document model."""

from modebridge.dom.document import Document, Subscription, VALUE_TAGS

__all__ = ["Document", "Subscription", "VALUE_TAGS"]
