"""Infrastructure Layer — row-store adapters and cross-cutting concerns.

Invariants:
    - Infrastructure never applies progression/decay rules itself
    - Driver exceptions (SQLAlchemy, Google API) are mapped to StoreError

Design Decisions:
    - One adapter per backend behind the EquipmentStore protocol
"""
