"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer for members and teams.
MemberRepository registers its named queries on import; the application
validates them at startup.
"""
