import pytest

from qdata_clean import ParseError
from qdata_clean.state import AppState, process, remove, select, upload


def test_upload_adds_active_record(qubit_csv):
    state = upload(AppState(), "runs.csv", qubit_csv)
    rec = state.active
    assert rec.name == "runs.csv"
    assert rec.rows == 5
    assert rec.size == len(qubit_csv.encode("utf-8"))
    assert rec.processed is False
    assert rec.content_type == "text/csv"
    assert state.uploads == (rec,)


def test_failed_upload_leaves_state_untouched(qubit_csv):
    state = upload(AppState(), "runs.csv", qubit_csv)
    with pytest.raises(ParseError):
        upload(state, "broken.json", "{oops")
    assert len(state.uploads) == 1


def test_process_replaces_table_and_marks_processed(qubit_csv):
    state = upload(AppState(), "runs.csv", qubit_csv)
    other = upload(state, "more.json", '[{"a": 1}]')
    first_id = state.active_id

    processed = process(other, first_id, ["remove_nulls"])
    rec = processed.get(first_id)
    assert rec.processed is True
    assert rec.rows == 4
    assert processed.active_id == first_id
    # the previous state and the other upload are unchanged
    assert other.get(first_id).rows == 5
    assert processed.uploads[1] is other.uploads[1]


def test_select_and_remove(qubit_csv):
    state = upload(AppState(), "runs.csv", qubit_csv)
    state = upload(state, "more.json", '[{"a": 1}]')
    first, second = (r.id for r in state.uploads)

    state = select(state, first)
    assert state.active.name == "runs.csv"

    state = remove(state, first)
    assert [r.id for r in state.uploads] == [second]
    assert state.active_id == second

    state = remove(state, second)
    assert state.uploads == ()
    assert state.active is None


def test_unknown_record_id(qubit_csv):
    state = upload(AppState(), "runs.csv", qubit_csv)
    with pytest.raises(KeyError):
        select(state, "nope")
    with pytest.raises(KeyError):
        process(state, "nope", ["remove_nulls"])
