"""Tests for search parameter resolution."""

from datetime import UTC, datetime, time
from uuid import uuid4

import pytest

from backoffice.audit.criteria import resolve_criteria, resolve_sort
from backoffice.audit.errors import InvalidFilterError
from backoffice.audit.models import AuditAction, AuditSearchParams, SortField, TargetModel


class TestResolveCriteria:
    """Tests for resolve_criteria()."""

    def test_no_params_means_no_filters(self) -> None:
        """Should produce no filters from empty params."""
        criteria = resolve_criteria(AuditSearchParams())

        assert criteria.model_dump(exclude_none=True) == {}

    def test_date_only_end_covers_whole_day(self) -> None:
        """Should extend a date-only end bound to the end of that day."""
        criteria = resolve_criteria(
            AuditSearchParams(start_date="2024-03-01", end_date="2024-03-31")
        )

        assert criteria.created_from == datetime(2024, 3, 1, tzinfo=UTC)
        assert criteria.created_to == datetime.combine(
            datetime(2024, 3, 31).date(), time.max, tzinfo=UTC
        )

    def test_each_date_bound_applies_alone(self) -> None:
        """Should apply either date bound on its own."""
        only_start = resolve_criteria(AuditSearchParams(start_date="2024-03-01"))
        only_end = resolve_criteria(AuditSearchParams(end_date="2024-03-01T12:00:00+02:00"))

        assert only_start.created_from is not None
        assert only_start.created_to is None
        assert only_end.created_from is None
        assert only_end.created_to is not None
        assert only_end.created_to.utcoffset() is not None

    def test_naive_datetime_is_taken_as_utc(self) -> None:
        """Should treat naive datetimes as UTC."""
        criteria = resolve_criteria(AuditSearchParams(start_date="2024-03-01T08:30:00"))

        assert criteria.created_from == datetime(2024, 3, 1, 8, 30, tzinfo=UTC)

    def test_invalid_date_is_rejected(self) -> None:
        """Should reject an unparseable date."""
        with pytest.raises(InvalidFilterError) as exc_info:
            resolve_criteria(AuditSearchParams(start_date="yesterday"))

        assert exc_info.value.field == "startDate"

    def test_inverted_range_is_rejected(self) -> None:
        """Should reject a start date after the end date."""
        with pytest.raises(InvalidFilterError):
            resolve_criteria(AuditSearchParams(start_date="2024-04-01", end_date="2024-03-01"))

    def test_action_and_target_model_are_parsed(self) -> None:
        """Should parse action and target model."""
        criteria = resolve_criteria(AuditSearchParams(action="update", target_model="forms"))

        assert criteria.action is AuditAction.UPDATE
        assert criteria.target_model is TargetModel.FORM

    def test_unknown_action_is_rejected(self) -> None:
        """Should reject an unknown action."""
        with pytest.raises(InvalidFilterError) as exc_info:
            resolve_criteria(AuditSearchParams(action="PATCH"))

        assert exc_info.value.field == "action"

    def test_form_template_target_is_name_substring(self) -> None:
        """Should match form templates by name substring."""
        criteria = resolve_criteria(
            AuditSearchParams(target_model="FormTemplate", target_name="Invoice")
        )

        assert criteria.target_name_contains == "Invoice"
        assert criteria.target_id is None

    def test_form_template_uses_name_even_for_identifier_values(self) -> None:
        """Should match form templates by name even for UUID values."""
        ident = str(uuid4())

        criteria = resolve_criteria(AuditSearchParams(target_model="FormTemplate", target_id=ident))

        assert criteria.target_name_contains == ident
        assert criteria.target_id is None

    def test_identifier_target_is_exact_id(self) -> None:
        """Should match a UUID target exactly on targetId."""
        ident = uuid4()

        criteria = resolve_criteria(AuditSearchParams(target_model="Form", target_id=str(ident)))

        assert criteria.target_id == ident

    def test_form_non_identifier_falls_back_to_form_number(self) -> None:
        """Should fall back to form number for non-UUID form targets."""
        criteria = resolve_criteria(AuditSearchParams(target_model="Form", target_id="F-2024"))

        assert criteria.form_number_contains == "F-2024"
        assert criteria.target_id is None

    def test_user_non_identifier_falls_back_to_staff_number(self) -> None:
        """Should fall back to user identifiers for non-UUID user targets."""
        criteria = resolve_criteria(AuditSearchParams(target_model="User", target_id="U123"))

        assert criteria.target_identifier == "U123"

    def test_other_model_non_identifier_is_ignored(self) -> None:
        """Should ignore a non-UUID target for other models."""
        criteria = resolve_criteria(
            AuditSearchParams(target_model="MarketingBudget", target_id="2024")
        )

        assert criteria.target_model is TargetModel.MARKETING_BUDGET
        assert criteria.target_id is None
        assert criteria.target_name_contains is None

    def test_target_without_model_is_rejected(self) -> None:
        """Should reject a target filter without targetModel."""
        with pytest.raises(InvalidFilterError) as exc_info:
            resolve_criteria(AuditSearchParams(target_id=str(uuid4())))

        assert exc_info.value.field == "targetModel"

    def test_invalid_operator_id_is_rejected(self) -> None:
        """Should reject a malformed operatorId."""
        with pytest.raises(InvalidFilterError) as exc_info:
            resolve_criteria(AuditSearchParams(operator_id="xyz"))

        assert exc_info.value.field == "operatorId"

    def test_quick_search_is_trimmed(self) -> None:
        """Should trim quick search and drop it when blank."""
        assert resolve_criteria(AuditSearchParams(quick_search="  bob ")).quick_search == "bob"
        assert resolve_criteria(AuditSearchParams(quick_search="   ")).quick_search is None


class TestResolveSort:
    """Tests for resolve_sort()."""

    def test_default_is_newest_first(self) -> None:
        """Should sort newest first by default."""
        sort = resolve_sort(AuditSearchParams())

        assert sort.field is SortField.CREATED_AT
        assert sort.descending is True

    @pytest.mark.parametrize("order", ["asc", "ASC", "ascending", "1"])
    def test_ascending_spellings(self, order: str) -> None:
        """Should accept each ascending spelling."""
        assert resolve_sort(AuditSearchParams(sort_order=order)).descending is False

    @pytest.mark.parametrize("order", ["desc", "descending", "-1"])
    def test_descending_spellings(self, order: str) -> None:
        """Should accept each descending spelling."""
        assert resolve_sort(AuditSearchParams(sort_order=order)).descending is True

    def test_nested_sort_field(self) -> None:
        """Should accept a nested sort field."""
        sort = resolve_sort(AuditSearchParams(sort_by="operatorInfo.name", sort_order="1"))

        assert sort.field is SortField.OPERATOR_NAME

    def test_unknown_sort_field_is_rejected(self) -> None:
        """Should reject a sort field outside the whitelist."""
        with pytest.raises(InvalidFilterError) as exc_info:
            resolve_sort(AuditSearchParams(sort_by="changes.before.password"))

        assert exc_info.value.field == "sortBy"

    def test_unknown_sort_order_is_rejected(self) -> None:
        """Should reject an unknown sort order."""
        with pytest.raises(InvalidFilterError):
            resolve_sort(AuditSearchParams(sort_order="sideways"))
