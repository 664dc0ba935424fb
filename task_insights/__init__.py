"""Task Insights - analytics over a user's tasks and goals"""

__version__ = '1.0.0'
