from usos_core.scopes import Scope, Scopes, parse_scope


def test_parse_scope() -> None:
    assert parse_scope("studies") is Scope.STUDIES
    assert parse_scope("not_a_scope") == "not_a_scope"


def test_str_is_sorted_and_pipe_separated() -> None:
    scopes = Scopes([Scope.STUDIES, "email", Scope.GRADES])

    assert str(scopes) == "email|grades|studies"


def test_equality_ignores_order_and_duplicates() -> None:
    assert Scopes(["grades", "studies"]) == Scopes([Scope.STUDIES, Scope.GRADES, "grades"])
    assert len(Scopes(["grades", "grades"])) == 1


def test_contains() -> None:
    scopes = Scopes(["grades", "custom"])

    assert Scope.GRADES in scopes
    assert "custom" in scopes
    assert Scope.STUDIES not in scopes


def test_empty() -> None:
    assert str(Scopes()) == ""
    assert not Scopes()
