"""
Entry point: builds a sample filtered load and, when a server is
configured, runs it in an auto-commit transaction.

Usage:
    python main.py

Set OGM_HTTP_NEO4J_URI / OGM_HTTP_NEO4J_PASSWORD (or a .env file) to
execute against a running Neo4j; otherwise only the statement is printed.
"""

import asyncio
import json
import os

from src.cypher import (
    BooleanOperator,
    ComparisonOperator,
    Filters,
    NestedNodeFilter,
    RootFilter,
    VariableDepthQuery,
)
from src.driver import HttpDriver
from src.driver.config import HttpDriverSettings
from src.shared.logging import setup_logging

LABEL = "Person"
DEPTH = 2


async def main() -> None:
    settings = HttpDriverSettings()
    logger = setup_logging("ogm.main", level=settings.log_level)

    filters = Filters([
        RootFilter("name", "Tom"),
        RootFilter("age", 30, ComparisonOperator.GREATER_THAN, BooleanOperator.AND),
        NestedNodeFilter(
            "name",
            "Acme",
            boolean_operator=BooleanOperator.AND,
            nested_property_name="employer",
            nested_entity_label="Company",
            relationship_type="WORKS_AT",
        ),
    ])
    request = VariableDepthQuery().find_by_properties(LABEL, filters, DEPTH)
    print(json.dumps(request.to_payload(), indent=2))

    if "OGM_HTTP_NEO4J_URI" not in os.environ:
        logger.info("No server configured; not executing")
        return

    async with HttpDriver(settings) as driver:
        async with driver.transaction(auto_commit=True) as tx:
            result = await tx.run(request)
    print(f"{len(result.rows)} row(s), {len(result.graphs)} graph(s)")


if __name__ == "__main__":
    asyncio.run(main())
