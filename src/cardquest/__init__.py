"""cardquest: adaptive learning engine for gamified flashcards."""

from cardquest.consts import VERSION

__version__ = VERSION
