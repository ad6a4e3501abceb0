"""
Services Layer

Tournament logic that:
- Accepts an open Session plus domain inputs (ids, scores, map names)
- Returns models or plain dataclasses
- Does NOT commit; the TournamentEngine owns the transaction
- Raises cs2cup.errors exceptions, never HTTP errors
"""
