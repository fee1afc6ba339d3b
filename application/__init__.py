"""
Application Layer for the HeavyGym API.

This package contains:
- ports/: Abstract repository interfaces (what the domain needs)
- exceptions.py: Domain errors carrying user-facing messages
"""
