"""Tools app package.

Tool listings published by suppliers. A listing is never deleted:
withdrawing it flips the ``active`` flag. Rating aggregates are written
by the reviews app.
"""
