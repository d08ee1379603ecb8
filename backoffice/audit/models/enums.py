"""Closed vocabularies of the audit trail."""

from enum import Enum


class AuditAction(str, Enum):
    """Kind of mutation recorded."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: str) -> "AuditAction":
        """Parse an action name case-insensitively.

        Raises:
            ValueError: If the value names no action
        """
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown action: {value!r}") from None


class TargetModel(str, Enum):
    """Entity collection an audit record's target_id points into."""

    USER = "User"
    FORM_TEMPLATE = "FormTemplate"
    FORM = "Form"
    MARKETING_CATEGORY = "MarketingCategory"
    MARKETING_BUDGET = "MarketingBudget"
    MARKETING_EXPENSE = "MarketingExpense"

    @classmethod
    def parse(cls, value: str) -> "TargetModel":
        """Parse a target model tag.

        Accepts the tag itself or the collection name used by older
        clients (``users``, ``formTemplates``, ``marketingExpenses``...).

        Raises:
            ValueError: If the value names no known collection
        """
        value = value.strip()
        try:
            return cls(value)
        except ValueError:
            pass
        model = _COLLECTION_NAMES.get(value)
        if model is None:
            raise ValueError(f"Unknown target model: {value!r}")
        return model


_COLLECTION_NAMES: dict[str, TargetModel] = {
    "users": TargetModel.USER,
    "formTemplates": TargetModel.FORM_TEMPLATE,
    "forms": TargetModel.FORM,
    "marketingCategories": TargetModel.MARKETING_CATEGORY,
    "marketingBudgets": TargetModel.MARKETING_BUDGET,
    "marketingExpenses": TargetModel.MARKETING_EXPENSE,
}


class SortField(str, Enum):
    """Fields the audit log can be ordered by."""

    CREATED_AT = "createdAt"
    ACTION = "action"
    TARGET_MODEL = "targetModel"
    OPERATOR_NAME = "operatorInfo.name"
    OPERATOR_IDENTIFIER = "operatorInfo.identifier"
    TARGET_NAME = "targetInfo.name"
