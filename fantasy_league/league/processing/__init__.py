"""
League processing layer.

Database-facing services and Prefect tasks built on the pure rules in
league.rules.

Structure:
- selection.py: Roster opening, squad saves (transfer ledger) and lineup saves
- chips.py: Chip availability, selection and usage recording
- settlement.py: Prefect tasks for settling rosters, plus the live preview
"""
