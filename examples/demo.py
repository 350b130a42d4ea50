#!/usr/bin/env python3
"""Demo: Using dddcontext as a Python library.

Loads the bookstore example catalog and assembles context for one user story
under a few different budgets.
"""

from pathlib import Path

from dddcontext.catalog import ArtifactCatalog, load_records
from dddcontext.context import ContextAssembler, ContextSelector, SelectionRequest
from dddcontext.exceptions import BudgetExceededError


def main():
    records = Path(__file__).parent / "bookstore_catalog.json"

    # 1. Build a frozen catalog from pre-classified records
    catalog = ArtifactCatalog.build(load_records(records))
    stats = catalog.stats()
    print(f"Artifacts: {stats['artifacts']}")
    for name, count in stats["bounded_contexts"].items():
        print(f"  {name}: {count}")

    selector = ContextSelector(catalog)
    assembler = ContextAssembler()

    # 2. Select under shrinking budgets
    for budget in (2000, 300, 150):
        request = SelectionRequest(
            target_bounded_context="Ordering",
            user_story_id="US-101",
            budget=budget,
            enhancers={"DomainEvent", "ValidationRule", "Test"},
        )
        result = selector.select(request)
        print(f"\n--- Budget {budget} ---")
        print(result.summary())

    # 3. Render the bundle for a prompt
    request = SelectionRequest(
        target_bounded_context="Ordering", user_story_id="US-101", budget=600
    )
    print("\n--- Bundle ---")
    print(assembler.assemble(selector.select(request)))

    # 4. The user story is never truncated
    try:
        selector.select(SelectionRequest(
            target_bounded_context="Ordering", user_story_id="US-101", budget=10,
        ))
    except BudgetExceededError as e:
        print(f"\nExpected failure: {e}")


if __name__ == "__main__":
    main()
