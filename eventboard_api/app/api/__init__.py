"""HTTP routes of the EventBoard API."""
