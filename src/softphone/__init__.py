"""Dialer client: the call session driven by the Twilio Voice SDK.

The SDK itself lives in the browser; this package models it behind the
``Device``/``Connection`` protocols so the session can run anywhere an
asyncio loop does, including tests.
"""
