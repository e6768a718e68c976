"""
Unit tests for the command validator and typed action schemas.
"""
import datetime as dt

import pytest

from app.domain.actions import (
    AddTimeCommand,
    CreateLeadCommand,
    CreateMeetingCommand,
    CreateTaskCommand,
    ProjectStatus,
    TaskPriority,
    UpdateProjectStatusCommand,
)
from app.domain.commands import ActionKind, ParsedCommand
from app.domain.validation import CommandValidator, Rejection


@pytest.fixture
def validator():
    return CommandValidator()


def parsed(action, **data):
    return ParsedCommand(action=action, data=data, summary="s")


class TestRequiredFields:
    """Missing or malformed required fields reject the whole command."""

    def test_unknown_action_is_rejected(self, validator):
        result = validator.validate(parsed(ActionKind.UNKNOWN, title="x"))
        assert isinstance(result, Rejection)
        assert result.action == ActionKind.UNKNOWN

    def test_create_lead_without_name_is_rejected(self, validator):
        result = validator.validate(parsed(ActionKind.CREATE_LEAD, company="Acme", budget=5000))
        assert isinstance(result, Rejection)
        assert result.field == "name"
        assert "missing" in result.reason

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_blank_title_counts_as_missing(self, validator, title):
        result = validator.validate(parsed(ActionKind.CREATE_TASK, title=title))
        assert isinstance(result, Rejection)
        assert result.field == "title"

    def test_non_numeric_hours_rejected(self, validator):
        result = validator.validate(parsed(ActionKind.ADD_TIME, hours="a couple"))
        assert isinstance(result, Rejection)
        assert result.field == "hours"
        assert "invalid" in result.reason

    @pytest.mark.parametrize("hours", [True, 0, -1, "nan"])
    def test_hours_must_be_a_positive_finite_number(self, validator, hours):
        assert isinstance(validator.validate(parsed(ActionKind.ADD_TIME, hours=hours)), Rejection)

    def test_status_outside_enum_rejected(self, validator):
        result = validator.validate(parsed(ActionKind.UPDATE_PROJECT_STATUS, project_id="p1", status="done"))
        assert isinstance(result, Rejection)
        assert result.field == "status"

    def test_update_status_requires_project_id(self, validator):
        result = validator.validate(parsed(ActionKind.UPDATE_PROJECT_STATUS, status="active"))
        assert isinstance(result, Rejection)
        assert result.field == "project_id"


class TestTypedCommands:
    """Valid data is converted to the action's typed model."""

    def test_create_task_defaults(self, validator):
        result = validator.validate(parsed(ActionKind.CREATE_TASK, title="  Prepare quote  ", project_id="p1"))
        assert isinstance(result, CreateTaskCommand)
        assert result.title == "Prepare quote"
        assert result.project_id == "p1"
        assert result.priority == TaskPriority.MEDIUM
        assert result.due_date is None

    def test_create_task_ignores_status_from_input(self, validator):
        result = validator.validate(parsed(ActionKind.CREATE_TASK, title="Ship", status="done"))
        assert isinstance(result, CreateTaskCommand)
        assert not hasattr(result, "status")

    def test_invalid_optional_priority_falls_back_to_default(self, validator):
        result = validator.validate(parsed(ActionKind.CREATE_TASK, title="Call supplier", priority="critical"))
        assert isinstance(result, CreateTaskCommand)
        assert result.priority == TaskPriority.MEDIUM

    def test_priority_is_normalized(self, validator):
        result = validator.validate(parsed(ActionKind.CREATE_TASK, title="Call supplier", priority=" URGENT "))
        assert result.priority == TaskPriority.URGENT

    def test_invalid_due_date_is_dropped(self, validator):
        result = validator.validate(parsed(ActionKind.CREATE_TASK, title="Order tiles", due_date="next week"))
        assert isinstance(result, CreateTaskCommand)
        assert result.due_date is None

    def test_due_date_accepts_datetime_string(self, validator):
        result = validator.validate(parsed(ActionKind.CREATE_TASK, title="Order tiles", due_date="2026-11-02T10:00:00Z"))
        assert result.due_date == dt.date(2026, 11, 2)

    def test_hours_from_numeric_string(self, validator):
        result = validator.validate(parsed(ActionKind.ADD_TIME, hours="2.5", description="reviewing plans"))
        assert isinstance(result, AddTimeCommand)
        assert result.hours == pytest.approx(2.5)
        assert result.date is None

    def test_lead_budget_with_thousand_separators(self, validator):
        result = validator.validate(parsed(ActionKind.CREATE_LEAD, name="Noa Levi", budget="250,000"))
        assert isinstance(result, CreateLeadCommand)
        assert result.budget == 250000

    def test_lead_invalid_budget_dropped(self, validator):
        result = validator.validate(parsed(ActionKind.CREATE_LEAD, name="Noa Levi", budget="a lot"))
        assert isinstance(result, CreateLeadCommand)
        assert result.budget is None

    def test_meeting_scheduled_at_is_timezone_aware(self, validator):
        result = validator.validate(parsed(ActionKind.CREATE_MEETING, title="Site visit",
                                           scheduled_at="2026-10-20T09:30:00", meeting_type="Site Supervision"))
        assert isinstance(result, CreateMeetingCommand)
        assert result.scheduled_at.tzinfo is not None
        assert result.meeting_type == "site_supervision"

    def test_project_status_normalized(self, validator):
        result = validator.validate(parsed(ActionKind.UPDATE_PROJECT_STATUS, project_id="p1", status="On Hold"))
        assert isinstance(result, UpdateProjectStatusCommand)
        assert result.status == ProjectStatus.ON_HOLD

    def test_extra_fields_are_not_carried(self, validator):
        result = validator.validate(parsed(ActionKind.CREATE_LEAD, name="Noa", organization_id="evil-org"))
        assert "organization_id" not in result.model_dump()
