"""
Domain services containing pure business logic.

Import from the modules directly:
    from domain.services.pick_sequence import generate_pick_sequence
    from domain.services.captain_selection import CaptainSelectionService
"""
