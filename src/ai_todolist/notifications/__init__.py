"""
Reminder delivery.

Components:
- reminder_scheduler.py: polling scheduler that shows due reminders exactly once per arm
- sinks.py: notification backends (plyer desktop notifications, console)
"""
