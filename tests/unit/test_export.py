import csv
import io

from interview_session import InterviewSession, MediaRef
from services.export import CSV_FIELDS, sessions_to_csv


def _session(**overrides):
    fields = dict(
        id="abc123",
        job_role='Engineer, "Platform"',
        experience="3 years",
        account_id="user-1",
        email="user@example.com",
        questions=["Q1?", "Q2?"],
        answers=["Short answer", MediaRef(url="https://cdn/q2.mp4")],
        feedback=["Average: needs more detail", "Poor: no answer"],
        ideal_answers=["Ideal 1", "Ideal 2"],
        overall_feedback="Needs improvement.",
        status="completed",
    )
    fields.update(overrides)
    return InterviewSession(**fields)


def test_csv_round_trips_commas_and_quotes():
    text = sessions_to_csv([_session()])
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == CSV_FIELDS
    row = dict(zip(rows[0], rows[1]))
    assert row["JobRole"] == 'Engineer, "Platform"'
    assert row["UserID"] == "user-1"
    assert row["Questions"] == "Q1? | Q2?"
    assert row["Answers"] == "Short answer | https://cdn/q2.mp4"
    assert row["OverallFeedback"] == "Needs improvement."


def test_every_field_is_quoted():
    first_line = sessions_to_csv([]).splitlines()[0]
    assert first_line == ",".join(f'"{name}"' for name in CSV_FIELDS)


def test_missing_optional_values_are_blank():
    text = sessions_to_csv([_session(email=None, industry=None, answers=[None, None], overall_feedback=None)])
    row = dict(zip(CSV_FIELDS, list(csv.reader(io.StringIO(text)))[1]))
    assert row["Email"] == ""
    assert row["Industry"] == ""
    assert row["Answers"] == " | "
    assert row["OverallFeedback"] == ""
