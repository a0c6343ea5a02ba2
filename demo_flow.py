"""
Demo: Walk the example catalog through tag routing, triggers and
complexity analysis, then print the catalog diagnostics.
"""

import logging

from qflow.analyzer import analyze_catalog
from qflow.complexity import analyze_complexity, sections_for_level, tags_for_level
from qflow.examples import build_example_catalog, build_example_tag_schema
from qflow.routing import filter_by_tags, visible_questions_for_stage
from qflow.serialization import catalog_to_yaml
from qflow.triggers import expand_triggers


def print_questions(title, questions):
    print(f"{title} ({len(questions)}):")
    for q in questions:
        print(f"  • {q.id} [{', '.join(q.tags)}]")
    print()


def print_report(report):
    """Pretty-print a CatalogReport."""
    print("=" * 70)
    print(f"CATALOG ANALYSIS REPORT: v{report.version}")
    print("=" * 70)
    print(f"  Questions:             {report.total_questions}")
    print(f"  Stages:                {report.questions_per_stage}")
    print(f"  Tags:                  {report.tag_usage}")
    print(f"  Triggers:              {report.total_triggers}")
    print(f"  With skip_if:          {report.questions_with_skip_if}")
    print(f"  Max condition depth:   {report.max_condition_depth}")
    print()
    if report.warnings:
        print("⚠️  WARNINGS")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("✨ NO WARNINGS - Catalog looks clean!")
    print()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    catalog = build_example_catalog()
    tag_schema = build_example_tag_schema()
    registry = catalog.registry()

    # Demo 1: operations focus, on-premise deployment
    answers = {"deployment.model": "on-premise"}
    print_questions(
        "Operations questions for on-premise deployment",
        filter_by_tags(catalog.questions, ["operations"], answers),
    )

    # Demo 2: what the deployment answer unlocks
    deployment = catalog.get_question("deployment.model")
    print_questions(
        "Follow-ups unlocked by deployment.model = hybrid",
        expand_triggers(deployment, "hybrid", registry),
    )

    # Demo 3: next core questions for a PII-handling project
    answers = {"project.name": "Patient Portal", "privacy.pii": True}
    print_questions(
        "Next core questions",
        visible_questions_for_stage(catalog.questions, answers, "core"),
    )

    # Demo 4: complexity of a regulated project
    answers = {
        "project.industry": "Healthcare",
        "privacy.pii": True,
        "privacy.regulations": ["hipaa", "gdpr"],
        "operations.sla": "99.99",
    }
    analysis = analyze_complexity(answers, tag_schema)
    level = analysis.recommended_level
    print(f"Recommended level: {level.value} (score {analysis.score})")
    print(f"  {analysis.description}")
    print(f"  Sections: {', '.join(sections_for_level(level))}")
    print(f"  Tags:     {', '.join(tags_for_level(level))}")
    print()

    print_report(analyze_catalog(catalog, tag_schema))

    with open("example_catalog_output.yaml", "w") as f:
        f.write(catalog_to_yaml(catalog))
    print("✅ Catalog exported to example_catalog_output.yaml")
