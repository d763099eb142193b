"""
Catalog of the skills bundled with concinnitas.

The set is fixed: install/uninstall/list always operate on every name here,
in this order.
"""

SKILL_NAMES: tuple[str, ...] = (
    "design-track",
    "design-discover",
    "design-flows",
    "design-structure",
    "design-system",
    "design-expression",
    "design-validate",
    "design-govern",
)

# Descriptor file every skill directory must contain
SKILL_FILE_NAME = "SKILL.md"

# Slash commands OpenCode exposes once the skills are loaded
SKILL_COMMANDS: tuple[tuple[str, str], ...] = (
    ("/design:track", "Manage design tracks"),
    ("/design:discover", "Phase 1: Problem understanding"),
    ("/design:flows", "Phase 2: User journey mapping"),
    ("/design:structure", "Phase 3: Information hierarchy"),
    ("/design:system", "Phase 4: Design tokens"),
    ("/design:expression", "Phase 5: Brand expression"),
    ("/design:validate", "Phase 6: Validation"),
    ("/design:govern", "Phase 7: Governance"),
)
