"""
Repo Monitor API - web backend for the pull request dashboard.

Provides a FastAPI backend that runs fetch cycles and serves the
classified pull request buckets to a browser dashboard.
"""
