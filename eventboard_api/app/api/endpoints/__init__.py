"""Domain routers: ``auth`` and ``events``."""
