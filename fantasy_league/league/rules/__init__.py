"""
Pure rule functions for the fantasy league.

Nothing in this package touches the database or Prefect; every function is
deterministic given its inputs and safe to call from any thread.

Structure:
- scoring.py: stat line -> fantasy points (position-dependent table)
- autosubs.py: bench-to-starter repair for starters who did not play
- multipliers.py: captaincy and chip effects on a round total
- transfers.py: squad/lineup validation and free-transfer banking
"""

GOALKEEPER = 'GK'
DEFENDER = 'DEF'
MIDFIELDER = 'MID'
FORWARD = 'FWD'

POSITIONS = (GOALKEEPER, DEFENDER, MIDFIELDER, FORWARD)
