from ontoapi.operations import OperationType
from ontoapi.paths import base_path_for, build_class_policy, resolve_operations

from tests.conftest import make_config

PERSON = "https://example.org/people#Person"


def _paths(**path_config):
    return make_config(path_config=path_config).path_config


def test_global_defaults_apply_without_override():
    assert resolve_operations(PERSON, _paths()) == {OperationType.GET_ALL, OperationType.GET_BY_KEY}


def test_allow_set_replaces_global_defaults():
    paths = _paths(paths_for_classes=[{"class_iri": PERSON, "allow_operations": ["post_single", "delete_by_key"]}])
    assert resolve_operations(PERSON, paths) == {OperationType.POST_SINGLE, OperationType.DELETE_BY_KEY}
    # other classes keep the defaults
    assert resolve_operations("https://example.org/people#Student", paths) == {
        OperationType.GET_ALL, OperationType.GET_BY_KEY,
    }


def test_deny_set_removes_enabled_operations():
    paths = _paths(
        post_paths={"post_single": {"enable": True}},
        paths_for_classes=[{"class_iri": PERSON, "deny_operations": ["get_all", "put_bulk"]}],
    )
    assert resolve_operations(PERSON, paths) == {OperationType.GET_BY_KEY, OperationType.POST_SINGLE}


def test_disable_all_paths_wins():
    paths = _paths(
        disable_all_paths=True,
        paths_for_classes=[{"class_iri": PERSON, "allow_operations": ["get_all"]}],
    )
    assert resolve_operations(PERSON, paths) == set()


def test_base_path_is_lowercase_plural():
    assert base_path_for("Person", _paths()) == "/people"
    assert base_path_for("ResearchProject", _paths()) == "/researchprojects"
    assert base_path_for("ResearchProject", _paths(use_kebab_case_paths=True)) == "/research-projects"


def test_path_shapes():
    paths = _paths(
        get_paths={"get_by_key": {"key_name": "personId"}},
        post_paths={"post_bulk": {"enable": True}, "post_single": {"enable": True}},
        put_paths={"put_by_key": {"enable": True}},
        delete_paths={"delete_by_key": {"enable": True}},
        search_paths={"search_by_post": {"enable": True}},
    )
    policy = build_class_policy(PERSON, "ppl-Person", "Person", paths)
    shaped = {(o.operation, o.path, o.http_method) for o in policy.operations}
    assert shaped == {
        (OperationType.GET_ALL, "/people", "get"),
        (OperationType.GET_BY_KEY, "/people/{personId}", "get"),
        (OperationType.POST_BULK, "/people/_bulk", "post"),
        (OperationType.POST_SINGLE, "/people", "post"),
        (OperationType.PUT_BY_KEY, "/people/{id}", "put"),
        (OperationType.DELETE_BY_KEY, "/people/{id}", "delete"),
        (OperationType.SEARCH_BY_POST, "/people/_search", "post"),
    }
    assert set(policy.paths()["/people"]) == {"get", "post"}
