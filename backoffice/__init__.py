"""Back-office API: audit-log recording and query engine.

Domain controllers (users, forms, form templates, marketing categories,
budgets and expenses) record every create/update/delete through the audit
recorder; administrators search the resulting trail over HTTP.
"""

__version__ = "1.0.0"
