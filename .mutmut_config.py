"""
Mutation testing configuration for mutmut.

Mutations are limited to the classification engine, rule handling and
ingestion; report styling and infrastructure code are skipped.
"""

MUTATED_PACKAGES = (
    "src/reconciliation/compare/",
    "src/reconciliation/rules/",
    "src/reconciliation/ingest/",
    "src/transformation/",
)


def pre_mutation(context):
    """
    Hook called before each mutation.

    Skips files outside the classification code and lines whose mutation
    cannot change an outcome.
    """
    if not context.filename.startswith(MUTATED_PACKAGES):
        context.skip = True
        return

    if context.filename.endswith("__init__.py"):
        context.skip = True
        return

    line = context.current_source_line.strip()

    # Log messages and metric labels
    if line.startswith(("logger.", "logging.", "counter.labels(")):
        context.skip = True

    # Docstrings
    if '"""' in line:
        context.skip = True
