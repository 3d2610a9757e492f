"""Database Infrastructure — async session factory and SQLAlchemy Base.

Invariants:
    - Single async engine per API process (initialized via init_db in the lifespan)
    - All sessions are async (AsyncSession)
"""
