"""Users app package.

Holds the marketplace user (renter, supplier or admin), the wallet balance
credited by the finances ledger, the reputation score maintained by the
reviews app and the PRO subscription lifecycle.
"""
