"""Service objects holding Foresy business rules."""
