"""
EnergyCoach - daily agenda with meal and exercise reminders.

A check-in anchors breakfast, lunch, dinner and exercise for the day; each
slot gets the day's recipe or workout and a one-shot reminder.
"""

__version__ = "0.3.0"
