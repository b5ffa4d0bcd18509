"""
Service layer.

Each service encapsulates the business logic and SQL for one domain so
that API handlers only validate input and shape responses.
"""
