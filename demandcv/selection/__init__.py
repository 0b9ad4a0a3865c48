"""
Model Selection

One selection run answers ONE question: which polynomial degree of
demand-on-temperature generalises best to unseen periods?

Layers:
- engines : pure computation (folds, fit/score, aggregate, select)
- steps   : orchestration around one engine each, via SelectionContext
- pipeline: runs steps in order for one run_id

Rules:
- Never train on a period that comes after the period being scored
  (rolling strategy).
- A failed cell aborts the run; a partial error matrix is never summarised.
- Nothing here retries: every failure is deterministic.
"""
