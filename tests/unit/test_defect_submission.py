"""
Tests for the defect submission handler.

The services are mocked to test request parsing and outcome mapping only.
"""
import base64
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Add src to path
SRC_PATH = Path(__file__).parent.parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from models.submission import DefectForm, SubmissionOutcome, SubmissionStatus
from models.ticket import LogEntry, Person, ProjectRef, Ticket
from models.user import CurrentUser
from utils.error_handling import UnauthorizedError

CREATED_AT = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def _user() -> CurrentUser:
    return CurrentUser(id="u1", display_name="Ann", email="a@x.com", role="QA")


def _ticket() -> Ticket:
    return Ticket(
        id="t-1",
        owner=Person(id="u1", display_name="Ann", email="a@x.com"),
        project=ProjectRef(project_id="p1", project_name="Checkout"),
        title="Login button broken",
        description="Clicking does nothing",
        priority="High",
        created_at=CREATED_AT,
        logs=[
            LogEntry(
                person_name="Ann",
                person_role="QA",
                timestamp=CREATED_AT,
                status_changed_to="created",
            )
        ],
    )


def _event(body, project_id="p1"):
    return {
        "pathParameters": {"projectId": project_id},
        "requestContext": {
            "http": {"method": "POST", "path": f"/projects/{project_id}/defects"},
            "authorizer": {"jwt": {"claims": {"sub": "u1"}}},
        },
        "body": json.dumps(body) if body is not None else None,
    }


@pytest.fixture
def services():
    """Patch the three lazily loaded services on the handler module."""
    from handlers import defect_submission

    submission = MagicMock()
    submission.submit = AsyncMock()
    projects = MagicMock()
    projects.get_project_name.return_value = "Checkout"
    identity = MagicMock()
    identity.get_current_user.return_value = _user()

    with patch.object(defect_submission, "_get_submission_service", return_value=submission), \
            patch.object(defect_submission, "_get_project_service", return_value=projects), \
            patch.object(defect_submission, "_get_identity_service", return_value=identity):
        yield {"submission": submission, "projects": projects, "identity": identity}


def test_successful_submission_returns_201(services):
    from handlers import defect_submission

    services["submission"].submit.return_value = SubmissionOutcome(
        status=SubmissionStatus.SUCCESS,
        form=DefectForm(),
        ticket_id="t-1",
        ticket=_ticket(),
        index_updated=True,
    )
    body = {"title": "Login button broken", "description": "Clicking does nothing", "priority": "High"}

    resp = defect_submission.lambda_handler(_event(body), None)

    assert resp["statusCode"] == 201
    payload = json.loads(resp["body"])
    assert payload["status"] == "success"
    assert payload["ticket"]["imageUrl"] == ""
    assert payload["ticket"]["logs"][0]["statusChangedTo"] == "created"
    assert payload["form"]["title"] == ""
    assert "correlation_id" in payload

    form, user, project = services["submission"].submit.call_args.args
    assert form.title == "Login button broken"
    assert form.image is None
    assert user.id == "u1"
    assert project == ProjectRef(project_id="p1", project_name="Checkout")


def test_image_is_decoded_and_bytes_not_echoed(services):
    from handlers import defect_submission

    raw = b"\x89PNG fake image"
    form_with_image = None

    async def fake_submit(form, user, project):
        nonlocal form_with_image
        form_with_image = form
        return SubmissionOutcome(status=SubmissionStatus.WRITE_ERROR, form=form, error="boom")

    services["submission"].submit.side_effect = fake_submit
    body = {
        "title": "t",
        "image": {
            "filename": "shot.png",
            "content_type": "image/png",
            "data_base64": base64.b64encode(raw).decode(),
        },
    }

    resp = defect_submission.lambda_handler(_event(body), None)

    assert resp["statusCode"] == 502
    assert form_with_image.image.data == raw
    payload = json.loads(resp["body"])
    assert payload["form"]["image"] == {
        "filename": "shot.png",
        "content_type": "image/png",
        "size": len(raw),
    }


def test_project_lookup_failure_does_not_block(services):
    from handlers import defect_submission

    services["projects"].get_project_name.return_value = None
    services["submission"].submit.return_value = SubmissionOutcome(
        status=SubmissionStatus.SUCCESS, form=DefectForm(), ticket_id="t-1", ticket=_ticket()
    )

    resp = defect_submission.lambda_handler(_event({"title": "x"}), None)

    assert resp["statusCode"] == 201
    project = services["submission"].submit.call_args.args[2]
    assert project.project_name == ""


@pytest.mark.parametrize(
    "status, code",
    [
        (SubmissionStatus.VALIDATION_ERROR, 422),
        (SubmissionStatus.UPLOAD_ERROR, 502),
        (SubmissionStatus.WRITE_ERROR, 502),
    ],
)
def test_failed_outcomes_map_to_status_codes(services, status, code):
    from handlers import defect_submission

    form = DefectForm(title="keep me")
    services["submission"].submit.return_value = SubmissionOutcome(
        status=status, form=form, error="failed"
    )

    resp = defect_submission.lambda_handler(_event({"title": "keep me"}), None)

    assert resp["statusCode"] == code
    payload = json.loads(resp["body"])
    assert payload["form"]["title"] == "keep me"
    assert payload["ticket"] is None


def test_bad_json_returns_400(services):
    from handlers import defect_submission

    event = _event(None)
    event["body"] = "{not json"
    resp = defect_submission.lambda_handler(event, None)

    assert resp["statusCode"] == 400
    assert json.loads(resp["body"])["message"] == "Invalid request"
    services["submission"].submit.assert_not_called()


def test_bad_base64_returns_400(services):
    from handlers import defect_submission

    body = {"image": {"data_base64": "***not base64***"}}
    resp = defect_submission.lambda_handler(_event(body), None)

    assert resp["statusCode"] == 400


def test_unauthenticated_request_returns_401(services):
    from handlers import defect_submission

    services["identity"].get_current_user.side_effect = UnauthorizedError("sub claim is required")

    resp = defect_submission.lambda_handler(_event({"title": "x"}), None)

    assert resp["statusCode"] == 401
    services["submission"].submit.assert_not_called()


def test_project_id_taken_from_path_when_no_path_parameters(services):
    from handlers import defect_submission

    services["submission"].submit.return_value = SubmissionOutcome(
        status=SubmissionStatus.SUCCESS, form=DefectForm(), ticket_id="t-1", ticket=_ticket()
    )
    event = _event({"title": "x"}, project_id="p42")
    event["pathParameters"] = None

    defect_submission.lambda_handler(event, None)

    project = services["submission"].submit.call_args.args[2]
    assert project.project_id == "p42"
