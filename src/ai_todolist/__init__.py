"""AI TodoList: local to-do list with AI quick-add and desktop reminders."""

__version__ = "0.1.0"
