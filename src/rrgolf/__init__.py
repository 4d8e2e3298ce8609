"""
rrgolf - Round-robin golf match engine

Tracks a 4-player, 18-hole round-robin golf match where every hole is
split into two head-to-head matchups worth 3/1/0 points.

Main components:
- match: rotation, score accumulation and the match state machine
- persistence: local cache + remote store synchronization
- sharing: share codes and the read-only spectator poller
- db: SQLAlchemy tables backing the remote store
"""

__version__ = "1.0.0"
