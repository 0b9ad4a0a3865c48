"""
Core value objects.

Defines WHAT a selection run works on, independent of how it is loaded
or scheduled.

Invariants:
- Observations are read-only once ingested.
- Dataset order is temporal and semantically meaningful.
- Folds / ErrorMatrix are derived per run and never mutated.

Core explicitly does NOT:
- Perform IO or data loading
- Fit models or compute errors
"""
