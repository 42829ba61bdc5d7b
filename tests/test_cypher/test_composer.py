"""
Unit tests for filter composition.

Pure string building, no database or network involved.
"""

import pytest

from src.cypher.composer import ClauseArena, compose, relationship_clause
from src.cypher.filters import (
    BooleanOperator,
    ComparisonOperator,
    DistanceComparison,
    DistanceFromPoint,
    Filters,
    NestedNodeFilter,
    NestedRelationshipFilter,
    RelationshipDirection,
    RootFilter,
)
from src.shared.exceptions import (
    FilterCompositionError,
    MissingOperatorError,
    UnsupportedFilterCombinationError,
)

AND = BooleanOperator.AND
OR = BooleanOperator.OR


def employer_filter(property_name: str, value, operator=AND) -> NestedNodeFilter:
    return NestedNodeFilter(
        property_name,
        value,
        boolean_operator=operator,
        nested_property_name="employer",
        nested_entity_label="Company",
        relationship_type="WORKS_AT",
    )


# ─── Root filters ───────────────────────────────────────────


class TestRootFilters:
    """Filters that constrain the returned node ``n``."""

    def test_no_filters_still_matches_root(self):
        composed = compose("Person", Filters())
        assert composed.prefix == "MATCH (n:`Person`) "
        assert composed.parameters == {}

    def test_single_equality(self):
        composed = compose("Person", Filters([RootFilter("name", "Tom")]))
        assert composed.prefix == "MATCH (n:`Person`) WHERE n.`name` = { `name_0` } "
        assert composed.parameters == {"name_0": "Tom"}

    def test_and_or_chain_shares_one_clause(self):
        filters = Filters([
            RootFilter("name", "Tom"),
            RootFilter("name", "Jerry", boolean_operator=OR),
            RootFilter("age", 30, ComparisonOperator.GREATER_THAN, AND),
        ])
        composed = compose("Person", filters)
        assert composed.prefix == (
            "MATCH (n:`Person`) WHERE n.`name` = { `name_0` } "
            "OR n.`name` = { `name_1` } "
            "AND n.`age` > { `age_2` } "
        )
        assert composed.parameters == {"name_0": "Tom", "name_1": "Jerry", "age_2": 30}

    def test_same_property_twice_gets_distinct_parameters(self):
        filters = Filters([
            RootFilter("age", 18, ComparisonOperator.GREATER_THAN_EQUAL),
            RootFilter("age", 65, ComparisonOperator.LESS_THAN, AND),
        ])
        composed = compose("Person", filters)
        assert composed.parameters == {"age_0": 18, "age_1": 65}

    def test_negated_filter(self):
        composed = compose("Person", Filters([RootFilter("name", "Tom", negated=True)]))
        assert composed.prefix == "MATCH (n:`Person`) WHERE NOT(n.`name` = { `name_0` }) "

    def test_unary_operator_binds_no_parameter(self):
        composed = compose("Person", Filters([RootFilter("email", comparison=ComparisonOperator.IS_NULL)]))
        assert composed.prefix == "MATCH (n:`Person`) WHERE n.`email` IS NULL "
        assert composed.parameters == {}

    def test_distance_filter(self):
        point = DistanceFromPoint(37.61649, -122.38681, 1000 * 1000.0)
        filters = Filters([
            RootFilter("location", point, ComparisonOperator.LESS_THAN, function=DistanceComparison())
        ])
        composed = compose("Restaurant", filters)
        assert composed.prefix == (
            "MATCH (n:`Restaurant`) WHERE distance(point(n),"
            "point({latitude:{ `lat_0` }, longitude:{ `lon_0` }})) < { `distance_0` } "
        )
        assert composed.parameters == {
            "lat_0": 37.61649,
            "lon_0": -122.38681,
            "distance_0": 1000000.0,
        }

    def test_backtick_in_property_name_is_doubled(self):
        composed = compose("Person", Filters([RootFilter("na`me", "Tom")]))
        assert composed.prefix == "MATCH (n:`Person`) WHERE n.`na``me` = { `na``me_0` } "
        assert composed.parameters == {"na`me_0": "Tom"}

    def test_backtick_in_label_cannot_close_the_quote(self):
        composed = compose("Person`) DETACH DELETE n //", Filters([RootFilter("name", "Tom")]))
        assert composed.prefix.startswith("MATCH (n:`Person``) DETACH DELETE n //`) WHERE ")

    def test_values_are_never_inlined(self):
        composed = compose("Person", Filters([RootFilter("name", "x' OR 1=1 //")]))
        assert "OR 1=1" not in composed.prefix
        assert composed.parameters["name_0"] == "x' OR 1=1 //"


# ─── Nested filters ─────────────────────────────────────────


class TestNestedFilters:
    """Filters on related nodes and on relationship entities."""

    def test_nested_node_gets_match_and_relationship_clause(self):
        filters = Filters([RootFilter("name", "Tom"), employer_filter("name", "Acme")])
        composed = compose("Person", filters)
        assert composed.prefix == (
            "MATCH (n:`Person`) WHERE n.`name` = { `name_0` } "
            "MATCH (m0:`Company`) WHERE m0.`name` = { `employer_name_1` } "
            "MATCH (n)-[:`WORKS_AT`]->(m0) "
        )
        assert composed.parameters == {"name_0": "Tom", "employer_name_1": "Acme"}

    def test_same_nested_label_is_deduplicated(self):
        filters = Filters([
            RootFilter("name", "Tom"),
            employer_filter("name", "Acme"),
            employer_filter("city", "London"),
        ])
        composed = compose("Person", filters)
        assert composed.prefix.count("MATCH (m0:`Company`)") == 1
        assert composed.prefix.count("[:`WORKS_AT`]") == 1
        assert (
            "MATCH (m0:`Company`) WHERE m0.`name` = { `employer_name_1` } "
            "AND m0.`city` = { `employer_city_2` } "
        ) in composed.prefix

    def test_match_clauses_keep_first_seen_order(self):
        pet = NestedNodeFilter(
            "name", "Fido",
            boolean_operator=AND,
            nested_property_name="pet",
            nested_entity_label="Animal",
            relationship_type="OWNS",
        )
        filters = Filters([RootFilter("name", "Tom"), employer_filter("name", "Zeta"), pet])
        prefix = compose("Person", filters).prefix
        assert prefix.index("(m0:`Company`)") < prefix.index("(m1:`Animal`)")
        assert prefix.index("MATCH (m1:`Animal`)") < prefix.index("MATCH (n)-[:`WORKS_AT`]->(m0)")
        assert prefix.endswith("MATCH (n)-[:`WORKS_AT`]->(m0) MATCH (n)-[:`OWNS`]->(m1) ")

    def test_first_filter_may_be_nested(self):
        only_nested = Filters([
            NestedNodeFilter(
                "name", "Fido",
                nested_property_name="pet",
                nested_entity_label="Dog",
                relationship_type="OWNS",
                relationship_direction=RelationshipDirection.INCOMING,
            )
        ])
        composed = compose("Person", only_nested)
        assert composed.prefix == (
            "MATCH (n:`Person`) "
            "MATCH (m0:`Dog`) WHERE m0.`name` = { `pet_name_0` } "
            "MATCH (n)<-[:`OWNS`]-(m0) "
        )

    def test_relationship_entity_filter_binds_r(self):
        filters = Filters([
            RootFilter("name", "Tom"),
            NestedRelationshipFilter(
                "since", 2010, ComparisonOperator.GREATER_THAN, AND,
                nested_property_name="employment",
                relationship_type="WORKS_AT",
            ),
        ])
        composed = compose("Person", filters)
        assert composed.prefix == (
            "MATCH (n:`Person`) WHERE n.`name` = { `name_0` } "
            "MATCH (n)-[r:`WORKS_AT`]->(m0) WHERE r.`since` > { `employment_since_1` } "
        )
        assert composed.parameters == {"name_0": "Tom", "employment_since_1": 2010}


class TestRelationshipClause:

    @pytest.mark.parametrize(
        "direction, expected",
        [
            (RelationshipDirection.OUTGOING, "MATCH (n)-[:`KNOWS`]->(m1) "),
            (RelationshipDirection.INCOMING, "MATCH (n)<-[:`KNOWS`]-(m1) "),
            (RelationshipDirection.UNDIRECTED, "MATCH (n)-[:`KNOWS`]-(m1) "),
        ],
    )
    def test_directions(self, direction, expected):
        assert relationship_clause("KNOWS", direction, "m1").text == expected

    def test_bound_relationship(self):
        clause = relationship_clause("RATED", RelationshipDirection.OUTGOING, "m0", bind_relationship=True)
        assert clause.text == "MATCH (n)-[r:`RATED`]->(m0) "

    def test_backtick_in_relationship_type_is_doubled(self):
        clause = relationship_clause("KNO`WS", RelationshipDirection.OUTGOING, "m0")
        assert clause.text == "MATCH (n)-[:`KNO``WS`]->(m0) "

    def test_arena_reuses_clause_per_label(self):
        arena = ClauseArena()
        first = arena.match_clause("Person", "n")
        assert arena.match_clause("Person", "x") is first
        assert list(arena.match_clauses) == ["Person"]


# ─── Errors ─────────────────────────────────────────────────


class TestCompositionErrors:

    def test_missing_operator_after_first(self):
        filters = Filters([RootFilter("name", "Tom"), RootFilter("age", 30)])
        with pytest.raises(MissingOperatorError) as exc_info:
            compose("Person", filters)
        assert exc_info.value.property_name == "age"
        assert "age" in str(exc_info.value)

    def test_first_filter_with_operator_is_rejected(self):
        with pytest.raises(FilterCompositionError) as exc_info:
            compose("Person", Filters([RootFilter("name", "Tom", boolean_operator=AND)]))
        assert not isinstance(exc_info.value, MissingOperatorError)
        assert exc_info.value.property_name == "name"

    def test_relationship_entity_with_or_is_unsupported(self):
        filters = Filters([
            RootFilter("name", "Tom"),
            NestedRelationshipFilter(
                "since", 2010, boolean_operator=OR,
                nested_property_name="employment",
                relationship_type="WORKS_AT",
            ),
        ])
        with pytest.raises(UnsupportedFilterCombinationError) as exc_info:
            compose("Person", filters)
        assert not isinstance(exc_info.value, FilterCompositionError)
        assert exc_info.value.property_name == "since"

    def test_nested_node_with_or_is_unsupported(self):
        filters = Filters([RootFilter("name", "Tom"), employer_filter("name", "Acme", OR)])
        with pytest.raises(UnsupportedFilterCombinationError):
            compose("Person", filters)

    def test_nested_label_equal_to_root_label_is_unsupported(self):
        friend = NestedNodeFilter(
            "name", "Jerry",
            boolean_operator=AND,
            nested_property_name="friend",
            nested_entity_label="Person",
            relationship_type="KNOWS",
        )
        filters = Filters([RootFilter("name", "Tom"), friend])
        with pytest.raises(UnsupportedFilterCombinationError) as exc_info:
            compose("Person", filters)
        assert exc_info.value.property_name == "name"
        assert "Person" in str(exc_info.value)

    def test_second_relationship_entity_filter_is_unsupported(self):
        def rating(prop, value, operator):
            return NestedRelationshipFilter(
                prop, value, boolean_operator=operator,
                nested_property_name="rating",
                relationship_type="RATED",
            )

        filters = Filters([rating("stars", 5, BooleanOperator.NONE), rating("comment", "ok", AND)])
        with pytest.raises(UnsupportedFilterCombinationError) as exc_info:
            compose("Movie", filters)
        assert exc_info.value.property_name == "comment"
