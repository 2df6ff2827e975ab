"""Finances app package.

Payment orchestration against the external gateway (Stripe), the owner
wallet and payouts, and the monthly earnings report.
"""
