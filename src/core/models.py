from enum import Enum


class ChangeAction(str, Enum):
    """Edits that are turned into change requests against the backing repository."""

    ADD_TEAM = "add-team"
    DELETE_TEAM = "delete-team"
    UPDATE_API = "update-api"
    DELETE_API = "delete-api"
    ASSIGN_API_TO_TEAM = "assign-api-to-team"
    ADD_VALUE = "add-value"
    DELETE_VALUE = "delete-value"


class SubmissionSink(str, Enum):
    """Where change requests are posted."""

    ISSUE = "issue"
    DISPATCH = "dispatch"


class ValidValueKind(str, Enum):
    """The three lists kept in the valid-values document."""

    TEAM_NAME = "teamNames"
    CMDB_GROUP = "cmdbGroups"
    BUSINESS_GROUP = "businessGroups"
