"""
Property-based tests for reconciliation and rendering using Hypothesis.

Tests invariants that should hold for all inputs:
- Partition completeness and disjointness
- Idempotence of self-diff
- Symmetry of added/deleted
- Minimality of edited field lists
- Separator count of rendered batches
"""

from hypothesis import given, settings, strategies as st

from tablesync.comparers import KeyComparer, ValueComparer
from tablesync.descriptor import RecordDescriptor
from tablesync.dialects import SQLServerDialect
from tablesync.engine import ChangeType, DiffResult, RecordReconciler, reconcile_records
from tablesync.render import render

DESCRIPTOR = RecordDescriptor.for_mapping(
    "items", columns=["id", "region", "name", "qty", "note"], key=["id", "region"], excluded=["note"]
)
COMPARABLE = ["id", "region", "name", "qty"]

keys = st.tuples(st.integers(min_value=0, max_value=30), st.sampled_from(["eu", "us", "e_u", ""]))
values = st.fixed_dictionaries({
    "name": st.one_of(st.none(), st.text(max_size=3)),
    "qty": st.one_of(st.none(), st.integers(min_value=-2, max_value=2)),
    "note": st.text(max_size=2),
})
tables = st.dictionaries(keys, values, max_size=25).map(
    lambda rows: [{"id": k[0], "region": k[1], **v} for k, v in rows.items()]
)


def _key(row):
    return (row["id"], row["region"])


@given(source=tables, destination=tables)
def test_partition_completeness(source, destination):
    """Keys on one side only land in added/deleted; shared keys never do."""
    result = reconcile_records(source, destination, DESCRIPTOR)

    source_keys = {_key(r) for r in source}
    destination_keys = {_key(r) for r in destination}
    added = {_key(r) for r in result.added}
    deleted = {_key(r) for r in result.deleted}
    edited = {_key(e.record) for e in result.edited}

    assert added == source_keys - destination_keys
    assert deleted == destination_keys - source_keys
    assert edited <= source_keys & destination_keys
    assert not (added & deleted) and not (added & edited) and not (deleted & edited)
    assert result.source_count == len(source)
    assert result.destination_count == len(destination)


@given(rows=tables)
def test_self_diff_is_empty(rows):
    result = reconcile_records(rows, list(rows), DESCRIPTOR)

    assert result.added == result.deleted == result.edited == ()
    assert result.change_type == ChangeType.NONE


@given(source=tables, destination=tables)
def test_added_and_deleted_are_symmetric(source, destination):
    forward = reconcile_records(source, destination, DESCRIPTOR)
    backward = reconcile_records(destination, source, DESCRIPTOR)

    assert {_key(r) for r in forward.added} == {_key(r) for r in backward.deleted}
    assert {_key(r) for r in forward.deleted} == {_key(r) for r in backward.added}
    assert {_key(e.record) for e in forward.edited} == {_key(e.record) for e in backward.edited}


@given(source=tables, destination=tables)
def test_edited_fields_are_minimal(source, destination):
    result = reconcile_records(source, destination, DESCRIPTOR)
    by_key = {_key(r): r for r in destination}

    for edit in result.edited:
        assert edit.changed_fields
        other = by_key[_key(edit.record)]
        changed = dict(edit.changed_fields)
        for column in COMPARABLE:
            if column in changed:
                assert changed[column] == edit.record[column]
                assert edit.record[column] != other[column]
            else:
                assert edit.record[column] == other[column]
        assert "note" not in changed


@settings(max_examples=25, deadline=None)
@given(source=tables, destination=tables)
def test_threaded_diff_matches_sequential(source, destination):
    threaded = RecordReconciler(max_workers=3, parallel_threshold=0, chunk_size=2)

    expected = reconcile_records(source, destination, DESCRIPTOR)
    actual = threaded.reconcile(source, destination, KeyComparer(DESCRIPTOR), ValueComparer(DESCRIPTOR))

    assert actual.edited == expected.edited
    assert actual.change_type == expected.change_type


@given(count=st.integers(min_value=0, max_value=60), batch_size=st.integers(min_value=1, max_value=25))
def test_separator_count(count, batch_size):
    rows = tuple({"id": i, "region": "eu", "name": "n", "qty": 1, "note": ""} for i in range(count))
    output = render(DiffResult(descriptor=DESCRIPTOR, added=rows), SQLServerDialect(), batch_size)

    lines = output.splitlines()
    expected = count // batch_size + (1 if count % batch_size else 0)

    assert lines.count("GO") == expected
    if count:
        assert lines[-1] == "GO"
        statements = [line for line in lines if line.startswith("INSERT")]
        assert len(statements) == count
    else:
        assert output == ""
