# Utility modules for the Task Insights service
