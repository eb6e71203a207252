"""
Analysis Engine Module

Calculates catalog reports from ingested titles:
- Distribution by kind, rating, country and genre
- Listings (release year, duration, recent additions, director, seasons)
- Yearly country share
- Cast appearances and keyword categories
"""

__version__ = "0.1.0"
