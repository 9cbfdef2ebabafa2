"""
Task Bridge: monday.com task aggregation for Slack.

Collects tasks from every active monday.com board, works out who owns them
and how urgent they are, and maps owners between Slack and monday.com.
"""

__version__ = "1.0.0"
