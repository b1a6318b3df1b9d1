"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Converts repository results into response schemas and
owns paging limits.
"""
