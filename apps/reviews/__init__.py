"""Reviews app package.

Feedback left by booking participants once a rental is completed, and the
aggregates derived from it: tool ratings and user reputation scores.
"""
