"""Core record model and the textual field grammar shared by CSV and TXT."""
