"""Service Layer — imperative shell around the core engines.

Invariants:
    - Services read through an EquipmentStore, call pure core functions, write back
    - No progression or decay arithmetic lives here
"""
