"""Realtime chat infrastructure (Socket.IO).

Session registry, presence, message codec and the per-connection event router
that fans chat traffic out to every connected participant.
"""
