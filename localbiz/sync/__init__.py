"""
Remote funnel sync.

Responsibilities:
- Mirror an authenticated user's answers to the hosted datastore so a funnel
  can be resumed on another device.
- Never block or fail the caller: every error is logged and dropped.
"""
