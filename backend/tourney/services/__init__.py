"""
Services Layer

Scheduling and standings logic that:
- Accepts domain inputs (IDs, an EntityRepository, typed values)
- Returns domain outputs (models, result objects, dicts)
- Does NOT depend on HTTP request/response objects
- Raises tourney.errors.EngineError subclasses on failure
"""
