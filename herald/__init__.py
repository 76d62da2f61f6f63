"""herald — route notifications to destinations and escalate delivery failures."""

__version__ = "0.1.0"
