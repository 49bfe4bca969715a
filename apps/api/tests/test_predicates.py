import pytest

from src.services.search.predicates import MATCH_ALL, And, Field, Op, Or, and_, describe


def test_match_all_is_empty_and():
    assert MATCH_ALL == And(())
    assert MATCH_ALL.children == ()
    assert MATCH_ALL != And((Field("gender", Op.EQ, "Male"),))


def test_unknown_field_rejected():
    with pytest.raises(ValueError):
        Field("salary", Op.EQ, 10)


def test_set_field_only_supports_has_any():
    with pytest.raises(ValueError):
        Field("languages", Op.EQ, "English")


def test_value_required_for_comparisons():
    with pytest.raises(ValueError):
        Field("age", Op.GTE)
    assert Field("latitude", Op.NOT_NULL).value is None


def test_in_values_become_tuples_so_nodes_hash():
    f = Field("services", Op.HAS_ANY, ["Support Worker"])
    assert f.value == ("Support Worker",)
    assert hash(f) == hash(Field("services", Op.HAS_ANY, ("Support Worker",)))


def test_and_flattens_nested_ands_and_drops_match_all():
    a = Field("gender", Op.EQ, "Male")
    b = Field("age", Op.GTE, 18)
    combined = and_(MATCH_ALL, And((a,)), b)
    assert combined == And((a, b))


def test_and_keeps_or_nodes_as_children():
    o = Or((Field("first_name", Op.ICONTAINS, "x"), Field("last_name", Op.ICONTAINS, "x")))
    assert and_(o).children == (o,)


def test_describe_renders_tree():
    p = And((
        Field("gender", Op.EQ, "Male"),
        Or((Field("date_of_birth", Op.IS_NULL), Field("age", Op.LTE, 30))),
    ))
    assert describe(p) == "(gender eq 'Male' AND (date_of_birth is_null OR age lte 30))"
    assert describe(MATCH_ALL) == "TRUE"
