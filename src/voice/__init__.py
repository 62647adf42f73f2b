"""Voice backend core: access tokens, TwiML routing and the CORS policy.

Both the long-running server (``api``) and the on-demand functions
(``functions``) are thin adapters over this package.
"""
