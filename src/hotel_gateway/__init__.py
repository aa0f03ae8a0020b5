"""Amadeus hotel search, pricing and content gateway for agents."""

__version__ = "0.1.0"
