from ontoapi.operations import (
    CardinalityType,
    HttpMethod,
    OperationType,
    PathKeyType,
    all_labels,
    operation_for_label,
    operations_for_cardinality,
    operations_for_method,
)


def test_eight_operations_with_labels():
    assert len(OperationType) == 8
    assert all_labels() == [
        "delete_by_key", "get_all", "get_by_key", "post_bulk",
        "post_single", "put_bulk", "put_by_key", "search_by_post",
    ]


def test_lookup_by_method():
    assert operations_for_method(HttpMethod.GET) == {OperationType.GET_ALL, OperationType.GET_BY_KEY}
    assert operations_for_method("put") == {OperationType.PUT_BULK, OperationType.PUT_BY_KEY}
    assert operations_for_method("patch") == frozenset()


def test_lookup_by_cardinality():
    plural = operations_for_cardinality(CardinalityType.PLURAL)
    assert plural == {
        OperationType.GET_ALL, OperationType.POST_BULK,
        OperationType.PUT_BULK, OperationType.SEARCH_BY_POST,
    }
    assert operations_for_cardinality("singular") | plural == set(OperationType)
    assert operations_for_cardinality("several") == frozenset()


def test_lookup_by_label():
    assert operation_for_label("GET_BY_KEY") is OperationType.GET_BY_KEY
    assert operation_for_label("search_by_post").method is HttpMethod.SEARCH
    assert operation_for_label("get_one") is None
    assert operation_for_label(None) is None


def test_path_key_types():
    assert PathKeyType.from_label("Integer") is PathKeyType.INTEGER
    assert PathKeyType.from_label("uuid") is None
