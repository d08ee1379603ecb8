"""Append-only audit trail: recording and faceted search.

Every domain mutation (users, forms, form templates, marketing categories,
budgets, expenses) is recorded as one AuditRecord carrying denormalized
operator/target summaries and a redacted before/after diff. Records are
never updated or deleted once written.
"""
