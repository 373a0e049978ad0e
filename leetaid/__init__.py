"""LeetAid - conversational hints for the code you paste."""

__version__ = "0.1.0"
